"""Exception taxonomy for frame analysis and ingestion."""


class PressureTraceError(Exception):
    """Base class for errors raised by the analysis engine."""


class FrameParseError(PressureTraceError):
    """A single frame payload could not be turned into a grid."""


class MalformedGridError(FrameParseError):
    def __init__(self, size: int):
        super().__init__(f"Frame data must represent a {size}x{size} matrix.")
        self.size = size


class BatchRejectedError(PressureTraceError):
    """The whole upload is unusable; no frame was attempted."""


class EmptyUploadError(BatchRejectedError):
    def __init__(self):
        super().__init__("File was empty.")


class NoFramesDetectedError(BatchRejectedError):
    def __init__(self, size: int):
        super().__init__(f"Unable to detect any {size}x{size} frames in the file.")
        self.size = size


class PersistError(PressureTraceError):
    """Writing a frame (and its alert) failed; the transaction was rolled back."""
