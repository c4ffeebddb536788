#!/usr/bin/env python3
"""
Analyze population history CSVs written by `python -m eco_sim.main --csv ...`.

Features:
  - --session latest|<id> filters to a single run (several runs may share a file)
  - Saves a timestamped cleaned CSV and a PNG under --outdir
  - Figure:
      (1) plant / herbivore / carnivore counts over simulated time
      (2) mean speed per species
      (3) mean vision per species
Usage:
  python analyze_history.py --history runs/history.csv --outdir reports --tag demo --session latest
"""
import argparse
import os
import sys
import time
import pandas as pd

# Use non-interactive backend for headless operation
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

COUNT_COLUMNS = ("plants", "herbivores", "carnivores")
GENE_COLUMNS = ("avg_herb_speed", "avg_herb_vision", "avg_carn_speed", "avg_carn_vision")


# ------------------------- utilities -------------------------
def ensure_dir(p: str) -> None:
    os.makedirs(p, exist_ok=True)

def timestamp(tag: str | None = None) -> str:
    t = time.strftime("%Y%m%d_%H%M%S")
    return f"{t}__{tag}" if tag else t


# ------------------------- loading ---------------------------
def load_history(path: str) -> pd.DataFrame:
    if not os.path.exists(path):
        print(
            "\n[ERROR] History CSV not found.\n"
            f"  Expected: {path}\n"
            "Hints:\n"
            "  • Run `python -m eco_sim.main --csv <path>` for at least 0.5 simulated seconds.\n",
            file=sys.stderr
        )
        sys.exit(1)
    return pd.read_csv(path)

def latest_session_id(df: pd.DataFrame) -> str | None:
    """Return the last session_id in file order."""
    if "session_id" not in df.columns or len(df) == 0:
        return None
    s = df["session_id"].dropna()
    return str(s.iloc[-1]) if len(s) else None

def filter_session(df: pd.DataFrame, session: str) -> pd.DataFrame:
    if not session or "session_id" not in df.columns:
        return df.copy()
    sid = latest_session_id(df) if session == "latest" else session
    if not sid:
        return df.copy()
    return df[df["session_id"].astype(str) == sid].copy()

def clean_history(df: pd.DataFrame) -> pd.DataFrame:
    """Cast numerics; if several sessions remain, average them per time stamp."""
    df = df.copy()
    keep = [c for c in ("time",) + COUNT_COLUMNS + GENE_COLUMNS if c in df.columns]
    for col in keep:
        df[col] = pd.to_numeric(df[col], errors="coerce")
    if "time" not in df.columns:
        return df
    df["time"] = df["time"].round(3)
    values = [c for c in keep if c != "time"]
    if "session_id" in df.columns and df["session_id"].nunique() > 1:
        df = df.groupby("time", as_index=False)[values].mean()
    return df[["time"] + values].sort_values("time").reset_index(drop=True)


# ------------------------- plotting --------------------------
def plot_history(df: pd.DataFrame, outdir: str, tag: str | None) -> str:
    ensure_dir(outdir)
    fig, ax = plt.subplots(3, 1, figsize=(10, 11), sharex=True)

    colors = {"plants": "tab:green", "herbivores": "tab:blue", "carnivores": "tab:red"}
    for col in COUNT_COLUMNS:
        if col in df.columns:
            ax[0].plot(df["time"], df[col], label=col.capitalize(), color=colors[col], linewidth=2.0)
    ax[0].set_ylabel("Count")
    ax[0].legend(loc="best")
    ax[0].grid(alpha=0.25)

    if "avg_herb_speed" in df.columns:
        ax[1].plot(df["time"], df["avg_herb_speed"], color="tab:blue", label="Herbivore speed")
    if "avg_carn_speed" in df.columns:
        ax[1].plot(df["time"], df["avg_carn_speed"], color="tab:red", label="Carnivore speed")
    ax[1].set_ylabel("Mean speed gene")
    ax[1].legend(loc="best")
    ax[1].grid(alpha=0.25)

    if "avg_herb_vision" in df.columns:
        ax[2].plot(df["time"], df["avg_herb_vision"], color="tab:blue", label="Herbivore vision")
    if "avg_carn_vision" in df.columns:
        ax[2].plot(df["time"], df["avg_carn_vision"], color="tab:red", label="Carnivore vision")
    ax[2].set_xlabel("Simulated time (s)")
    ax[2].set_ylabel("Mean vision gene")
    ax[2].legend(loc="best")
    ax[2].grid(alpha=0.25)

    fig.tight_layout()
    png = os.path.join(outdir, f"history_{timestamp(tag)}.png")
    fig.savefig(png, dpi=160)
    plt.close(fig)
    print(f"[OK] Saved {png}")
    return png


def export_csv(df: pd.DataFrame, outdir: str, base: str, tag: str | None) -> str:
    ensure_dir(outdir)
    path = os.path.join(outdir, f"{base}_{timestamp(tag)}.csv")
    df.to_csv(path, index=False)
    print(f"[OK] Wrote {path}")
    return path


# ------------------------- main ------------------------------
def main(argv=None):
    ap = argparse.ArgumentParser()
    ap.add_argument("--history", type=str, default="runs/history.csv",
                    help="Path to the history CSV written by eco_sim.main")
    ap.add_argument("--outdir", type=str, default="reports",
                    help="Output directory for plots and exported CSVs")
    ap.add_argument("--tag", type=str, default="",
                    help="Optional label to append to filenames (e.g., 'noseason')")
    ap.add_argument("--session", type=str, default="",
                    help="Session ID to analyze; 'latest' picks the most recent session.")
    args = ap.parse_args(argv)

    raw = load_history(args.history)
    df = filter_session(raw, args.session)
    if args.session:
        print(f"[OK] Filtering analysis to session={args.session} ({len(df)} rows)")
    if len(df) == 0:
        print("[WARN] No rows left after filtering; nothing to analyze.")
        return 1

    clean = clean_history(df)
    tag = args.tag or None
    export_csv(clean, args.outdir, base="history_summary", tag=tag)
    plot_history(clean, args.outdir, tag=tag)
    print(f"\nDone. Outputs are in: {args.outdir}")
    return 0

if __name__ == "__main__":
    sys.exit(main())
