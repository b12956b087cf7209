"""Bridge to the external ``hostlist-compiler`` process."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Sequence

from adrules.errors import CompilerError
from adrules.logger import logger

__all__ = ["compile_rules"]


def compile_rules(command: Sequence[str], merged: bytes, workdir: Path) -> bytes:
    """Write ``merged`` into ``workdir``, run ``<command> -i <in> -o <out>``, return the output.

    The compiler's stdout/stderr are inherited so its progress shows up in the
    CI log.
    """
    input_path = workdir / "merged_rules.txt"
    output_path = workdir / "compiled_rules.txt"
    input_path.write_bytes(merged)

    argv = [*command, "-i", str(input_path), "-o", str(output_path)]
    logger.info("Compiling rules with %s", command[0])
    try:
        subprocess.run(argv, check=True)
    except FileNotFoundError as exc:
        raise CompilerError(f"Compiler not found: {command[0]}") from exc
    except subprocess.CalledProcessError as exc:
        raise CompilerError(f"{command[0]} failed with exit code {exc.returncode}") from exc

    try:
        return output_path.read_bytes()
    except OSError as exc:
        raise CompilerError(f"Failed to read compiled file '{output_path}': {exc}") from exc
