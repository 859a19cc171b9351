from diamond.models.team import Team

# A side needs someone to pitch and someone else to bat
MIN_PLAYERS = 2


class LineupValidator:
    @staticmethod
    def validate(team: Team) -> dict:
        """
        Validate a team for play.

        Rules:
        1. At least 2 players
        2. A pitcher is recommended; without one the best PIT rating takes the mound
        """
        errors = []
        warnings = []
        players = list(team.players)

        if len(players) < MIN_PLAYERS:
            errors.append(f"{team.display_name} needs at least {MIN_PLAYERS} players, got {len(players)}")

        pitchers = sum(1 for p in players if p.pitches)
        if players and pitchers == 0:
            warnings.append(f"{team.display_name} has no pitcher; the highest PIT rating will pitch")

        return {
            "valid": len(errors) == 0,
            "errors": errors,
            "warnings": warnings,
            "breakdown": {
                "players": len(players),
                "pitchers": pitchers,
                "position_players": len(players) - pitchers,
                "overall": team.overall_rating,
            },
        }

    @classmethod
    def validate_matchup(cls, home: Team, away: Team) -> dict:
        """Validate both sides of a game"""
        errors = []
        if home is None or away is None:
            return {"valid": False, "errors": ["Pick both a home team and an away team"], "warnings": []}
        if home.id == away.id:
            errors.append("Home and away must be different teams")

        home_result = cls.validate(home)
        away_result = cls.validate(away)
        errors.extend(home_result["errors"])
        errors.extend(away_result["errors"])

        return {
            "valid": len(errors) == 0,
            "errors": errors,
            "warnings": home_result["warnings"] + away_result["warnings"],
        }
