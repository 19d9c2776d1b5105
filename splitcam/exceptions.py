"""Custom exceptions for splitcam"""

class SplitcamError(Exception):
    """Base exception for all splitcam errors"""
    def __init__(self, message: str, module: str = None):
        self.message = message
        self.module = module or "unknown"
        super().__init__(f"[{self.module}] {self.message}")

class EngineNotFoundError(SplitcamError):
    """ffmpeg or ffprobe could not be run"""

class ProbeError(SplitcamError):
    """Base class for media analysis errors"""
    def __init__(self, message: str, module: str = None):
        super().__init__(f"Probe failed: {message}", module)

class InvalidQualityError(SplitcamError):
    """Unknown quality preset name"""
    def __init__(self, name: str, module: str = None):
        self.name = name
        super().__init__(
            f"Invalid quality preset: {name}. Valid options: lossless, high, medium",
            module
        )

class InvalidSideError(SplitcamError):
    """Unknown split side name"""
    def __init__(self, name: str, module: str = None):
        self.name = name
        super().__init__(f"Invalid side: {name}. Valid options: left, right", module)

class SplitError(SplitcamError):
    """ffmpeg failed while extracting one side"""
    def __init__(self, message: str, module: str = None, output: str = "", exit_code: int = None):
        self.output = output
        self.exit_code = exit_code
        super().__init__(f"Split failed: {message}", module)

class OutputDirectoryError(SplitcamError):
    """Output directory could not be created"""

class BatchCancelledError(SplitcamError):
    """Batch was cancelled before all inputs were processed"""
