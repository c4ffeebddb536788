#!/usr/bin/env python3
"""
One-shot runner:
  1) Run the headless simulation (appends samples to the history CSV)
  2) Analyze only the session that run produced

Usage:
  python run_sim_then_analyze.py --seconds 300 --outdir reports --tag demo
"""
import argparse
import subprocess
import sys
import os
import csv

def get_latest_session_id(history_path: str) -> str | None:
    if not os.path.exists(history_path):
        return None
    last_sid = None
    with open(history_path, newline="") as f:
        for row in csv.DictReader(f):
            sid = row.get("session_id")
            if sid:
                last_sid = sid
    return last_sid

def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--history", default="runs/history.csv")
    ap.add_argument("--seconds", default="120")
    ap.add_argument("--seed", default="42")
    ap.add_argument("--outdir", default="reports")
    ap.add_argument("--tag", default="")
    args, passthru = ap.parse_known_args()

    # 1) Run the simulation
    sim_cmd = [sys.executable, "-m", "eco_sim.main",
               "--seconds", args.seconds, "--seed", args.seed,
               "--csv", args.history, *passthru]
    print("[launcher] Starting sim:", " ".join(sim_cmd))
    ret = subprocess.call(sim_cmd)
    if ret != 0:
        print(f"[launcher] sim exited with code {ret}", file=sys.stderr)
        sys.exit(ret)

    # 2) Resolve latest session_id
    sid = get_latest_session_id(args.history)
    if not sid:
        print("[launcher] No session_id found in history CSV; was the run shorter than one sample?")
        sys.exit(0)

    # 3) Analyze only this session
    ana_cmd = [
        sys.executable, "analyze_history.py",
        "--history", args.history,
        "--outdir", args.outdir,
        "--tag", args.tag,
        "--session", sid
    ]
    print("[launcher] Analyzing session:", sid)
    print("[launcher] Running:", " ".join(ana_cmd))
    sys.exit(subprocess.call(ana_cmd))

if __name__ == "__main__":
    main()
