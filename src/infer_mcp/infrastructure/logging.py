from datetime import datetime
import inspect
from functools import wraps
from infer_mcp.config import LOG_PATH


def _compact(val, depth: int = 0):
    """Short, single-line representation of a tool input or output."""
    try:
        if isinstance(val, str):
            return val if len(val) <= 100 else val[:97] + "..."

        if isinstance(val, float):
            return f"{val:.6g}"

        # DataFrames and arrays
        if hasattr(val, "shape"):
            return f"<{type(val).__name__} shape={val.shape}>"

        # engine results: NullDistribution, Statistic
        kind = getattr(val, "kind", None)
        if kind is not None and hasattr(val, "reps") and hasattr(val, "values"):
            return f"<{type(val).__name__} {getattr(kind, 'value', kind)} reps={val.reps}>"
        if kind is not None and hasattr(val, "value"):
            return f"{getattr(kind, 'value', kind)}={val.value:.6g}"

        if isinstance(val, (list, dict, tuple, set)) and len(val) > 30:
            return f"<{type(val).__name__} len={len(val)}>"

        # one level into nested report dicts (null_distribution_summary, group_proportions)
        if isinstance(val, dict) and depth == 0:
            return "{" + ", ".join(f"{k!r}: {_compact(v, depth + 1)}" for k, v in val.items()) + "}"

        return repr(val)
    except Exception:
        return "<unprintable>"


def _write_entry(lines: list[str]) -> None:
    entry = datetime.now().strftime("\n%Y-%m-%d %H:%M:%S:\n") + "".join(f"\t{line}\n" for line in lines)
    with LOG_PATH.open("a", encoding="utf-8") as f:
        f.write(entry)


def loggable(func):
    """
    Decorator that appends one entry per call to `history.log`:
      - function name and first docstring line
      - ORIGINAL inputs (before the tool touches them)
      - outputs on success, or the exception on failure
      - seed used (random_state), so any simulation can be replayed
      - execution time

    Exceptions are logged and re-raised unchanged.
    """
    sig = inspect.signature(func)
    doc = inspect.getdoc(func)
    description = doc.strip().split("\n")[0] if doc else "Description not available."

    @wraps(func)
    def wrapper(*args, **kwargs):
        bound = sig.bind(*args, **kwargs)
        bound.apply_defaults()
        inputs = {k: _compact(v) for k, v in bound.arguments.items()}

        lines = [
            f"Function: {func.__name__}()",
            f"Description: {description}",
            f"Inputs: {inputs}",
        ]
        if "random_state" in bound.arguments:
            lines.append(f"Seed: {bound.arguments['random_state']}")

        start_time = datetime.now()
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            elapsed = (datetime.now() - start_time).total_seconds()
            lines.append(f"Status: failed ({type(e).__name__}: {e})")
            lines.append(f"Execution Time: {elapsed:.4f}s")
            _write_entry(lines)
            raise
        elapsed = (datetime.now() - start_time).total_seconds()

        if isinstance(result, dict):
            outputs = {k: _compact(v) for k, v in result.items()}
        else:
            outputs = _compact(result)
        lines.append("Status: ok")
        lines.append(f"Outputs: {outputs}")
        lines.append(f"Execution Time: {elapsed:.4f}s")
        _write_entry(lines)

        return result

    return wrapper
