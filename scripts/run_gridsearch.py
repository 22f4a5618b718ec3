#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
from pathlib import Path
from datetime import datetime

from gridsearch.config import Config
from gridsearch.ingest import load_dataset
from gridsearch.search import GridSearch, SearchConfig, load_search_config
from gridsearch.utils import set_log_level


def main() -> int:
    parser = argparse.ArgumentParser(description="Three-step grid search for the DGP behind a binary panel.")
    parser.add_argument("--data", required=True, help="Path to the panel (CSV, Parquet or JSON).")
    parser.add_argument("--yname", required=True, help="Outcome column (0/1).")
    parser.add_argument("--tname", required=True, help="Time column.")
    parser.add_argument("--pname", required=True, help="Unit identifier column.")
    parser.add_argument("--config", type=str, default=None, help="Optional YAML search configuration.")
    parser.add_argument("--pattern", choices=["contingency", "slopes"], default=None)
    parser.add_argument("--step1", type=int, default=None)
    parser.add_argument("--step2", type=int, default=None)
    parser.add_argument("--step3", type=int, default=None)
    parser.add_argument("--reliability", type=float, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--workers", type=int, default=None,
                        help=f"Worker processes (default {Config.DEFAULT_WORKERS})")
    parser.add_argument("--log-level", dest="log_level", default=None, help=f"Logging level (default {Config.LOG_LEVEL})")
    parser.add_argument("--top", type=int, default=10, help="Best configurations to print.")
    parser.add_argument("--out-dir", dest="out_dir", type=str, default=None,
                        help="Output directory (if not provided, uses runs/<timestamp>/)")
    args = parser.parse_args()

    base = load_search_config(args.config) if args.config else SearchConfig(
        seed=Config.DEFAULT_RANDOM_SEED, n_workers=Config.DEFAULT_WORKERS
    )
    overrides = {
        "pattern": args.pattern,
        "step1": args.step1,
        "step2": args.step2,
        "step3": args.step3,
        "reliability": args.reliability,
        "seed": args.seed,
        "n_workers": args.workers,
    }
    cfg = SearchConfig(**{**base.model_dump(), **{k: v for k, v in overrides.items() if v is not None}})

    if args.log_level:
        set_log_level(args.log_level)

    df = load_dataset(args.data, columns=[args.pname, args.tname, args.yname])
    result = GridSearch(cfg).run(df, yname=args.yname, tname=args.tname, pname=args.pname)

    if args.out_dir:
        out_dir = Path(args.out_dir)
    else:
        Config.ensure_directories()
        out_dir = Config.RUNS_DIR / datetime.now().strftime("%Y%m%d_%H%M%S")
    out_dir.mkdir(parents=True, exist_ok=True)

    results_path = out_dir / "results.csv"
    history_path = out_dir / "history.csv"
    result.table.to_csv(results_path, index=False)
    result.history.to_csv(history_path, index=False)

    report = result.to_report(k=args.top, artifacts=[str(results_path), str(history_path)])
    with open(out_dir / "report.json", "w", encoding="utf-8") as f:
        json.dump(report.model_dump(mode="json"), f, indent=2, sort_keys=True)

    # Print summary
    print(f"Pattern: {cfg.pattern.value}  units={result.dims.n_units} waves={result.dims.n_waves} "
          f"base_rate={result.dims.base_rate:.4f}")
    for s in result.stages:
        threshold = "-" if s.threshold is None else f"{s.threshold:.6f}"
        print(f"Step {s.stage}: {s.candidates} tuples x {s.draws_per_tuple} draws, "
              f"{s.failed_draws} failed, threshold {threshold}, kept {s.survivors}")
    print(result.best(args.top).to_string(index=False))
    print(f"Outputs: {out_dir}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
