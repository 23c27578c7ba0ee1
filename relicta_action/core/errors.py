"""Process exit codes.

Any non-zero code fails the workflow step; the distinct values make the cause
visible in the job log without reading the whole output.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit status of ``relicta-action``. Values are part of the CLI contract.

    - 1: bad inputs (missing token, invalid boolean input)
    - 2: unsupported OS or CPU
    - 3: a relicta subcommand exited non-zero
    - 4: download failed
    - 5: unusable archive, binary missing from it, or a runner file not writable
    - 6: checksum mismatch
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    COMMAND_ERROR = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5
    INTEGRITY_ERROR = 6

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self is ErrorCode.OK

    @property
    def is_error(self) -> bool:
        return not self.is_success
