import argparse
import csv
import logging
import multiprocessing as mp
import os
import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from pathlib import Path

from togglenet.config import load_config, resolve_run_paths
from togglenet.counts import solve_min_applications
from togglenet.evaluation.metrics import checked_total
from togglenet.parsing import ParseError, parse_problem
from togglenet.strategies import UnreachableError, solve_min_presses

mp.freeze_support()

ROOT = Path(__file__).resolve().parents[1]

FIELDNAMES = [
    "line",
    "positions",
    "steps",
    "strategy",
    "presses",
    "applications",
    "time_ms",
    "error",
]


def read_lines(path: str) -> list[tuple[int, str]]:
    """Return (1-based line number, text) for every non-blank line."""
    with open(path, "r", encoding="utf-8") as f:
        return [
            (i + 1, line.strip())
            for i, line in enumerate(f)
            if line.strip()
        ]


def make_batches(lines, batch_size):
    """Create job batches for parallel processing."""
    for lo in range(0, len(lines), batch_size):
        yield {"lines": lines[lo : lo + batch_size]}


def _solve_line(line_no: int, text: str, params: dict) -> dict:
    row = {name: "" for name in FIELDNAMES}
    row["line"] = line_no
    start_time = time.perf_counter()
    try:
        problem = parse_problem(text)
    except ParseError as exc:
        row["error"] = f"parse error: {exc}"
        return row

    row["positions"] = problem.n_positions
    row["steps"] = problem.n_steps
    errors = []
    try:
        sol = solve_min_presses(problem, params)
        row["presses"] = sol.presses
        row["strategy"] = sol.strategy or ""
    except UnreachableError as exc:
        errors.append(f"pattern unreachable: {exc}")
    if problem.target_counts is not None:
        try:
            row["applications"] = solve_min_applications(problem, params).presses
        except UnreachableError as exc:
            errors.append(f"counts unreachable: {exc}")

    row["time_ms"] = (time.perf_counter() - start_time) * 1000
    row["error"] = "; ".join(errors)
    return row


def _run_batch(job):
    """Solve one batch of puzzle lines."""
    return [_solve_line(line_no, text, job["params"]) for line_no, text in job["lines"]]


def run_pool(jobs, workers, max_inflight=None, total_jobs=None):
    """Run jobs in parallel and yield result rows as batches complete."""
    ctx = mp.get_context("spawn")
    if max_inflight is None:
        max_inflight = workers * 3

    inflight = set()
    done = 0
    total_rows = 0
    start_time = time.time()

    with ProcessPoolExecutor(max_workers=workers, mp_context=ctx) as ex:
        jobs_iter = iter(jobs)
        while len(inflight) < max_inflight:
            try:
                j = next(jobs_iter)
            except StopIteration:
                break
            inflight.add(ex.submit(_run_batch, j))

        while inflight:
            for fut in as_completed(inflight):
                inflight.remove(fut)
                rows = fut.result()
                done += 1
                total_rows += len(rows)
                yield from rows

                elapsed = time.time() - start_time
                print(
                    f"\r[progress] {done}/{total_jobs} batches | "
                    f"{total_rows:>7,} lines | "
                    f"elapsed: {int(elapsed // 60)}m {int(elapsed % 60)}s",
                    end="",
                    flush=True,
                )
                if done == total_jobs:
                    print()
                # Submit next job to keep inflight bounded
                try:
                    j = next(jobs_iter)
                    inflight.add(ex.submit(_run_batch, j))
                except StopIteration:
                    pass
                break  # re-enter as_completed with updated set


def summarize(rows, column: str):
    """Checked total of one answer column, or None if any line lacks it."""
    values = [row[column] for row in rows]
    if any(v == "" for v in values):
        return None
    return checked_total(values)


def main():
    n_cpus = os.cpu_count() or 1
    default_workers = max(n_cpus - 1, 1)

    ap = argparse.ArgumentParser(description="Solve toggle-network puzzles in bulk.")
    ap.add_argument("--config", default=str(ROOT / "configs" / "solve.yaml"))
    ap.add_argument("--input", default=None, help="Puzzle file, one per line")
    ap.add_argument("--out", default=None, help="Output CSV path")
    ap.add_argument(
        "--workers", type=int, default=None, help="Number of workers"
    )
    ap.add_argument(
        "--batch-size", type=int, default=None, help="Lines per batch"
    )
    ap.add_argument("--log-level", default="WARNING")
    args = ap.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    params, run_cfg = load_config(args.config)
    # config paths are relative to the repo, CLI paths to the working directory
    run_cfg = resolve_run_paths(run_cfg, ROOT)
    input_path = args.input or run_cfg.get("input")
    if not input_path:
        ap.error("no input file given (use --input or run.input in the config)")
    workers = args.workers or int(run_cfg.get("workers", default_workers))
    batch_size = args.batch_size or int(run_cfg.get("batch_size", 64))
    out_dir = Path(run_cfg.get("output_dir", str(ROOT / "results")))
    out_dir.mkdir(parents=True, exist_ok=True)
    out_csv = args.out or str(out_dir / "answers.csv")

    lines = read_lines(input_path)
    total_jobs = (len(lines) + batch_size - 1) // batch_size

    def job_stream():
        for j in make_batches(lines, batch_size):
            j["params"] = params
            yield j

    print(
        f"\nSolving {len(lines):,} puzzles in {total_jobs:,} batches with {workers} workers...\n"
    )

    start_time = time.time()
    rows = []
    with open(out_csv, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
        writer.writeheader()
        for row in run_pool(
            job_stream(),
            workers=workers,
            max_inflight=workers * 3,
            total_jobs=total_jobs,
        ):
            writer.writerow(row)
            rows.append(row)

    rows.sort(key=lambda r: r["line"])
    for row in rows:
        if row["error"]:
            print(f"line {row['line']}: {row['error']}")

    presses = summarize(rows, "presses")
    applications = summarize(rows, "applications")
    print(f"Minimum presses (distinct steps): {presses if presses is not None else 'n/a'}")
    print(
        f"Minimum applications (exact counts): "
        f"{applications if applications is not None else 'n/a'}"
    )

    elapsed = time.time() - start_time
    print(f"\nDone in {int(elapsed/60)}m {int(elapsed%60)}s")
    print(f"Output: {out_csv}\n")


if __name__ == "__main__":
    main()
