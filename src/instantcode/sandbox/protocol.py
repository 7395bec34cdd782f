"""Wire models exchanged with the sandbox child process."""

from typing import Literal

from pydantic import BaseModel


class SandboxRequest(BaseModel):
    code: str  # base64 of the marshalled module code object
    call: str
    allowed_imports: list[str] = []
    memory_limit_mb: int | None = None
    cpu_seconds: float | None = None
    max_output_chars: int = 4096


class SandboxResponse(BaseModel):
    ok: bool
    kind: Literal["compile", "runtime"] | None = None
    value: str | None = None
    error: str | None = None
    output: str = ""
