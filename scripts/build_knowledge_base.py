"""
Convert spreadsheet Q&A sheets into the knowledge base JSONL file.

Input assumptions:
- .xlsx or .csv files with columns ``question``, ``answer`` and optionally
  ``keywords``.
- ``keywords`` holds one cell of phrases separated by ``;`` (or ``,`` when
  no ``;`` is present).
- Rows with an empty answer are skipped and reported.

Output JSONL schema (one object per line):
{
  "question": str,
  "answer": str,
  "keywords": [str, ...]
}

Usage:
  python scripts/build_knowledge_base.py --input_dir data/sheets --output data/knowledge_base.jsonl
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Dict, List

import pandas as pd

from responder import KnowledgeBase


def _to_str(x: object) -> str:
    if x is None:
        return ""
    if isinstance(x, float) and pd.isna(x):
        return ""
    return str(x).strip()


def _split_keywords(cell: str) -> List[str]:
    if not cell:
        return []
    sep = ";" if ";" in cell else ","
    return [kw.strip().lower() for kw in cell.split(sep) if kw.strip()]


def _read_sheet(path: Path) -> pd.DataFrame:
    if path.suffix.lower() == ".csv":
        return pd.read_csv(path)
    return pd.read_excel(path)


def process_file(path: Path) -> List[Dict]:
    df = _read_sheet(path)
    df.columns = [str(col).strip().lower() for col in df.columns]
    items: List[Dict] = []
    for idx, row in df.iterrows():
        question = _to_str(row.get("question"))
        answer = _to_str(row.get("answer"))
        if not question or not answer:
            print(f"{path.name}: skipping row {idx} (missing question or answer)")
            continue
        items.append(
            {
                "question": question,
                "answer": answer,
                "keywords": _split_keywords(_to_str(row.get("keywords"))),
            }
        )
    return items


def main() -> None:
    parser = argparse.ArgumentParser(description="Convert Q&A spreadsheets to knowledge base JSONL.")
    parser.add_argument("--input_dir", default="data/sheets", help="Directory containing .xlsx/.csv files")
    parser.add_argument("--output", default="data/knowledge_base.jsonl", help="Output JSONL file path")
    args = parser.parse_args()

    input_dir = Path(args.input_dir)
    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    sheets = sorted(p for p in input_dir.iterdir() if p.is_file() and p.suffix.lower() in {".xlsx", ".csv"})
    if not sheets:
        print(f"No .xlsx or .csv files found in {input_dir}")
        return

    all_items: List[Dict] = []
    for f in sheets:
        all_items.extend(process_file(f))

    # Fails with ConfigError before anything is written.
    KnowledgeBase.load(all_items)

    with output_path.open("w", encoding="utf-8") as w:
        for obj in all_items:
            json.dump(obj, w, ensure_ascii=False)
            w.write("\n")

    print(f"Wrote {len(all_items)} entries to {output_path}")


if __name__ == "__main__":
    main()
