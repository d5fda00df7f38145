# Purpose: CLI entrypoint to assess one utterance and print the crisis JSON.
from __future__ import annotations
import argparse, json, sys
from typing import List, Optional

from wellnest.safety import CrisisEngine, CrisisTables, load_tables, should_escalate


def build_engine(policy_dir: Optional[str], scan_all: bool) -> CrisisEngine:
    tables = CrisisTables.from_dir(policy_dir) if policy_dir else load_tables()
    return CrisisEngine(tables, scan_all_languages=scan_all)


def run_assess(text: str, lang: str, *, matches: bool = False,
               policy_dir: Optional[str] = None, scan_all: bool = False) -> dict:
    engine = build_engine(policy_dir, scan_all)
    result = engine.assess(text, lang)
    out = result.to_wire()
    out["escalate"] = should_escalate(result.tier)
    out["care_steps"] = list(engine.care_steps(result.tier))
    if matches:
        out["matched_terms"] = sorted(engine.extract_matches(text, lang))
    return out


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Assess crisis risk for one utterance")
    ap.add_argument("text", help="utterance to assess; '-' reads stdin")
    ap.add_argument("--lang", default="en", help="language tag (en, hi, ta, hi-IN, ...)")
    ap.add_argument("--matches", action="store_true", help="include matched pattern fragments")
    ap.add_argument("--policy-dir", default=None, help="alternate YAML table directory")
    ap.add_argument("--scan-all", action="store_true", help="check every language table, keep the worst tier")
    args = ap.parse_args(argv)

    text = sys.stdin.read() if args.text == "-" else args.text
    out = run_assess(text, args.lang, matches=args.matches,
                     policy_dir=args.policy_dir, scan_all=args.scan_all)
    print(json.dumps(out, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
