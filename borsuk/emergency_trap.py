class DrawingAborted(Exception):
    pass

class AbortFlag:
    def __init__(self) -> None:
        self._trap = False

    def set(self):
        self._trap = True

    def is_set(self) -> bool:
        return self._trap

    def trap(self):
        if self._trap:
            raise DrawingAborted()
