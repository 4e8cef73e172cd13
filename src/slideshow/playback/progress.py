"""Polled progress value for renderers."""


class ProgressReporter:
    """Reads countdown progress for the current slide.

    Sampled on demand by the renderer; never pushes updates.
    """

    def __init__(self, controller):
        self._controller = controller

    def progress_fraction(self) -> float:
        controller = self._controller
        if not (controller.is_playing and controller.auto_advance):
            return 0.0
        return controller.clock.elapsed_fraction()
