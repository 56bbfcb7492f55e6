"""
Bankroll tracking for a single session.
"""


class BankrollTracker:
    """Tracks roll count, peak bankroll and hand outcomes across one session."""

    def __init__(self, starting_bankroll: float):
        self.starting_bankroll = starting_bankroll
        self.current_bankroll = starting_bankroll
        self.max_bankroll = starting_bankroll
        self.roll_count = 0
        self.points_made = 0
        self.seven_outs = 0

    def record_roll(self, bankroll_after: float) -> None:
        """Record a settled roll and its effect on the bankroll."""
        self.roll_count += 1
        self.current_bankroll = bankroll_after
        if bankroll_after > self.max_bankroll:
            self.max_bankroll = bankroll_after

    def record_point_made(self) -> None:
        self.points_made += 1

    def record_seven_out(self) -> None:
        self.seven_outs += 1

    def get_session_stats(self) -> dict:
        """Get statistics for the session so far."""
        return {
            'rolls': self.roll_count,
            'max_bankroll': self.max_bankroll,
            'final_bankroll': self.current_bankroll,
            'points_made': self.points_made,
            'seven_outs': self.seven_outs,
        }
