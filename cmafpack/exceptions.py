"""Custom exceptions for the cmafpack packaging pipeline"""

class CmafpackError(Exception):
    """Base exception for all cmafpack errors"""
    def __init__(self, message: str, module: str = None):
        self.message = message
        self.module = module or "unknown"
        super().__init__(f"[{self.module}] {self.message}")

class MetadataError(CmafpackError):
    """Source metadata cannot be retrieved or parsed"""

class PlanningError(CmafpackError):
    """Source information cannot yield a quality ladder"""

class EncodingError(CmafpackError):
    """Base class for encoder-related errors"""
    def __init__(self, message: str, module: str = None):
        super().__init__(f"Encoding error: {message}", module)

class CommandExecutionError(EncodingError):
    """External command exited unsuccessfully"""
    def __init__(self, message: str, module: str = None, exit_code: int = None, output: str = ""):
        super().__init__(message, module)
        self.exit_code = exit_code
        self.output = output

class EncoderTimeoutError(EncodingError):
    """External command exceeded its wall-clock limit and was killed"""

class PackagingError(CmafpackError):
    """No rendition survived encoding; the job cannot produce manifests"""

class ManifestWriteError(CmafpackError):
    """Manifests could not be staged or published"""

class JobConflictError(CmafpackError):
    """A job already owns the requested video directory"""

class DependencyError(CmafpackError):
    """Missing required dependencies"""
