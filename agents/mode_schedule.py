from env.constants import SCATTER, CHASE, SCATTER_DURATIONS, CHASE_DURATIONS


class ModeSchedule:
    """
    Scatter/chase cycle shared by all four ghosts.

    The owner advances it once per tick; ghosts compare ``flips`` against the
    count they last followed, so every ghost taking part in the cycle changes
    mode on the same tick.
    """

    def __init__(self, scatter=SCATTER_DURATIONS, chase=CHASE_DURATIONS):
        self.scatter = tuple(scatter)
        self.chase = tuple(chase)
        self.reset()

    def reset(self):
        self.phase_index = 0
        self.elapsed = 0.0
        self.in_scatter = True
        self.flips = 0

    @property
    def mode(self):
        return SCATTER if self.in_scatter else CHASE

    @property
    def limit(self):
        durations = self.scatter if self.in_scatter else self.chase
        return durations[min(self.phase_index, len(durations) - 1)]

    def advance(self, dt_ms) -> bool:
        """Returns True when this tick flipped scatter <-> chase."""
        self.elapsed += dt_ms
        if self.elapsed < self.limit:
            return False
        self.elapsed = 0.0
        self.in_scatter = not self.in_scatter
        # O índice só avança na borda scatter -> chase
        if not self.in_scatter:
            self.phase_index += 1
        self.flips += 1
        return True
