import logging
import subprocess

logger = logging.getLogger(__name__)

# shell convention for "command not found"
RC_NOT_FOUND = 127


def run_cmd(cmd: list[str], timeout_s: int = 10) -> tuple[int, str, str]:
    """
    Run a command and return:
      - return code (rc)
      - stdout (string)
      - stderr (string)

    A missing binary (e.g. networksetup off macOS) is reported as rc 127
    instead of raising, so callers can fold it into their evidence.
    """
    logger.debug("Running %s", " ".join(cmd))
    try:
        p = subprocess.run(
            cmd,
            text=True,              # decode output to str instead of bytes
            capture_output=True,    # capture stdout/stderr
            timeout=timeout_s
        )
    except FileNotFoundError as e:
        return RC_NOT_FOUND, "", str(e)

    # Normalise None → "" and strip whitespace
    return p.returncode, (p.stdout or "").strip(), (p.stderr or "").strip()


def get_evidence(cmd, rc, stdout, stderr):

    return {
        "cmd": " ".join(cmd),
        "rc": rc,
        "stdout": stdout,
        "stderr": stderr
    }
