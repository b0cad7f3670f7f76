from pathlib import Path
from typing import Any, Callable, Optional


# type_tag -> {"ext", "save", "load", "describe"}
# describe(obj) returns the metadata recorded in the manifest entry
TYPE_REGISTRY: dict[str, dict[str, Any]] = {}


def _register(type_tag: str, ext: str, save: Callable, load: Callable, describe: Optional[Callable] = None):
    TYPE_REGISTRY[type_tag] = {
        "ext": ext,
        "save": save,
        "load": load,
        "describe": describe or (lambda obj: {}),
    }


# csv: tabular datasets (pandas DataFrame)
def _save_csv(obj, path: Path):
    assert hasattr(obj, "to_csv"), "csv type expects a DataFrame-like object"
    obj.to_csv(path, index=False)

def _load_csv(path: Path):
    import pandas as pd
    return pd.read_csv(path)

def _describe_csv(obj):
    return {"n_rows": int(len(obj)), "columns": [str(col) for col in obj.columns]}

_register("csv", ".csv", _save_csv, _load_csv, _describe_csv)


# json: plain results
def _save_json(obj, path: Path):
    import json
    with open(path, "w") as f:
        json.dump(obj, f)

def _load_json(path: Path):
    import json
    with open(path, "r") as f:
        return json.load(f)

_register("json", ".json", _save_json, _load_json)


# null_distribution: NullDistribution objects, joblib-compressed
def _save_null_distribution(obj, path: Path):
    import joblib
    joblib.dump(obj, path, compress=3)

def _load_null_distribution(path: Path):
    import joblib
    return joblib.load(path)

def _describe_null_distribution(obj):
    # SeedSequence entropy: int, sequence of ints, or None
    seed = obj.seed
    if seed is not None and not isinstance(seed, int):
        seed = [int(s) for s in seed]
    return {
        "stat": obj.kind.value,
        "generation": obj.generation,
        "reps": int(obj.reps),
        "seed": seed,
    }

_register("null_distribution", ".joblib", _save_null_distribution, _load_null_distribution, _describe_null_distribution)
