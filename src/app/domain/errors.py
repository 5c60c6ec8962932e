from __future__ import annotations

from typing import Optional


class RecipeSyncError(Exception):
    pass


class ConfigurationError(RecipeSyncError):
    def __init__(self, missing: list[str]):
        super().__init__(f"Missing Notion configuration: {', '.join(missing)}")
        self.missing = missing


class FileParseError(RecipeSyncError):
    def __init__(self, filename: str, reason: str):
        super().__init__(f"Failed to parse {filename}: {reason}")
        self.filename = filename
        self.reason = reason


class RemoteStoreError(RecipeSyncError):
    def __init__(self, operation: str, reason: str, status_code: Optional[int] = None):
        super().__init__(f"Notion error during {operation}: {reason}")
        self.operation = operation
        self.reason = reason
        self.status_code = status_code


class RateLimitedError(RemoteStoreError):
    def __init__(self, operation: str, reason: str = "Rate limited"):
        super().__init__(operation, reason, status_code=429)


class WebsiteResolutionError(RemoteStoreError):
    def __init__(self, domain: str, reason: str):
        super().__init__("resolve_website", f"{domain}: {reason}")
        self.domain = domain


class GenerationError(RecipeSyncError):
    def __init__(self, domain: str, reason: str):
        super().__init__(f"Keyword generation failed for {domain}: {reason}")
        self.domain = domain
        self.reason = reason
