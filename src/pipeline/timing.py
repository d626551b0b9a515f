from pathlib import Path
import time

_LOG_PATH = Path.home() / "skillrack_points_timing.log"

def timing_log(msg: str, *, path: Path = _LOG_PATH) -> None:
    ts = time.strftime("%Y-%m-%d %H:%M:%S")
    with Path(path).open("a", encoding="utf-8", errors="replace") as f:
        f.write(f"{ts} {msg}\n")
