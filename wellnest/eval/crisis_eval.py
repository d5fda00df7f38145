# wellnest/eval/crisis_eval.py
# -*- coding: utf-8 -*-
"""
Offline crisis eval harness (writes artifacts/eval/crisis_metrics.json)

- No network, no model calls: drives the regex engine over labelled utterances.
- Reads an optional YAML config (validated with jsonschema); falls back to a
  built-in seed set when no items are given.
- Exit code 0 when the gates hold, 1 otherwise.

Gates:
  - under_escalations == 0   (predicted tier below the expected one)
  - missed_escalations == 0  (expected high/imminent, not flagged for escalation)
"""

import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from jsonschema import ValidationError, validate

from wellnest.eval.schema import CONFIG_SCHEMA
from wellnest.safety import CrisisEngine, CrisisTables, RiskTier, load_tables, should_escalate


# ---------- configuration ----------

DEFAULT_OUT = "artifacts/eval/crisis_metrics.json"
UNDER_ESCALATION_MAX = 0
MISSED_ESCALATION_MAX = 0

@dataclass
class EvalItem:
    text: str
    expect: RiskTier
    lang: str = "en"
    id: Optional[str] = None

@dataclass
class EvalConfig:
    out_path: str = DEFAULT_OUT
    policy_dir: Optional[str] = None
    scan_all_languages: bool = False
    items: List[EvalItem] = field(default_factory=list)

SEED_ITEMS = [
    EvalItem(text="I want to kill myself", lang="en", expect=RiskTier.IMMINENT),
    EvalItem(text="I can't go on like this", lang="en", expect=RiskTier.HIGH),
    EvalItem(text="I hate my life", lang="en", expect=RiskTier.MODERATE),
    EvalItem(text="I had a wonderful day", lang="en", expect=RiskTier.LOW),
    EvalItem(text="I started a new diet", lang="en", expect=RiskTier.LOW),
    EvalItem(text="मुझे मरना है", lang="hi", expect=RiskTier.IMMINENT),
    EvalItem(text="जीने का कोई मतलब नहीं", lang="hi", expect=RiskTier.HIGH),
    EvalItem(text="நான் வாழ விரும்பவில்லை", lang="ta", expect=RiskTier.IMMINENT),
]


def load_config(path: Optional[str]) -> EvalConfig:
    """
    Load a YAML config if provided. Raises FileNotFoundError for a path that
    does not exist and jsonschema.ValidationError on a malformed file, rather
    than silently evaluating the seed set.
    """
    cfg = EvalConfig()
    if path:
        if not Path(path).exists():
            raise FileNotFoundError(f"eval config not found: {path}")
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
        validate(instance=data, schema=CONFIG_SCHEMA)
        cfg.out_path = data.get("out_path", DEFAULT_OUT)
        cfg.policy_dir = data.get("policy_dir")
        cfg.scan_all_languages = bool(data.get("scan_all_languages", False))
        cfg.items = [
            EvalItem(text=row["text"], lang=row.get("lang", "en"),
                     expect=RiskTier.parse(row["expect"]), id=row.get("id"))
            for row in data.get("items", [])
        ]

    if not cfg.items:
        cfg.items = list(SEED_ITEMS)
    return cfg


# ---------- evaluation ----------

def ensure_parent_dirs(p: Path) -> None:
    p.parent.mkdir(parents=True, exist_ok=True)

def run_eval(cfg: EvalConfig, tables: Optional[CrisisTables] = None) -> Dict[str, Any]:
    tables = tables or (CrisisTables.from_dir(cfg.policy_dir) if cfg.policy_dir else load_tables())
    engine = CrisisEngine(tables, scan_all_languages=cfg.scan_all_languages)

    results_items = []
    exact = under = over = missed = 0
    confusion: Dict[str, Dict[str, int]] = {t.value: {p.value: 0 for p in RiskTier} for t in RiskTier}

    for it in cfg.items:
        got = engine.classify(it.text, it.lang)
        confusion[it.expect.value][got.value] += 1
        if got == it.expect:
            exact += 1
        elif got < it.expect:
            under += 1
        else:
            over += 1
        miss = should_escalate(it.expect) and not should_escalate(got)
        missed += int(miss)

        results_items.append({
            "id": it.id,
            "lang": it.lang,
            "expect": it.expect.value,
            "got": got.value,
            "escalate": should_escalate(got),
            "matched_terms": sorted(engine.extract_matches(it.text, it.lang)),
        })

    total = len(cfg.items)
    ok = (under <= UNDER_ESCALATION_MAX) and (missed <= MISSED_ESCALATION_MAX)

    return {
        "version": "1.0",
        "results": {
            "total": total,
            "exact": exact,
            "exact_rate": exact / max(1, total),
            "under_escalations": under,
            "over_escalations": over,
            "missed_escalations": missed,
            "confusion": confusion,
            "ok": ok,
        },
        "items": results_items,
    }


# ---------- entrypoint ----------

def main(argv: List[str]) -> int:
    cfg_path = argv[1] if len(argv) > 1 else None
    try:
        cfg = load_config(cfg_path)
    except ValidationError as e:
        print(f"[crisis_eval] invalid config {cfg_path}: {e.message}", file=sys.stderr)
        return 2
    except FileNotFoundError as e:
        print(f"[crisis_eval] {e}", file=sys.stderr)
        return 2

    metrics = run_eval(cfg)

    out_path = Path(cfg.out_path or DEFAULT_OUT)
    ensure_parent_dirs(out_path)
    out_path.write_text(json.dumps(metrics, ensure_ascii=False, indent=2), encoding="utf-8")
    print(f"[crisis_eval] wrote: {out_path} ok={metrics['results']['ok']}")
    return 0 if metrics["results"]["ok"] else 1


if __name__ == "__main__":
    sys.exit(main(sys.argv))
