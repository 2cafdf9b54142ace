#!/usr/bin/env python3
"""
Pre-download the local LLM used when ``ai.provider`` is ``local``.

Prints per-file progress so the first chat request does not stall on a download.
"""

from __future__ import annotations

import argparse
import os
import sys
from typing import List

from responder.config import load_config


def _download_repo_files(repo_id: str, revision: str | None) -> None:
    try:
        from huggingface_hub import HfApi, hf_hub_download  # type: ignore
    except ImportError as exc:
        print("Missing dependency: huggingface_hub. Install the 'local' extra first.", file=sys.stderr)
        raise SystemExit(1) from exc

    api = HfApi()
    files: List[str] = api.list_repo_files(repo_id=repo_id, revision=revision, repo_type="model")
    if not files:
        print(f"No files found for {repo_id}", file=sys.stderr)
        return

    total = len(files)
    print(f"Downloading model files for {repo_id} ({total} files)")
    for idx, filename in enumerate(files, start=1):
        print(f"[{idx}/{total}] {filename}")
        hf_hub_download(repo_id=repo_id, filename=filename, revision=revision, repo_type="model")
    print("Done.")


def main() -> None:
    parser = argparse.ArgumentParser(description="Pre-download the local chat model with progress")
    parser.add_argument("--config", default=os.environ.get("ASSISTANT_CONFIG"), help="Config file to read ai.model from")
    parser.add_argument("--llm-model", default=os.environ.get("LLM_MODEL"), help="Model repo id (overrides config)")
    parser.add_argument("--revision", default=None, help="Model revision (optional)")
    args = parser.parse_args()

    model_id = args.llm_model or load_config(args.config).get("ai", {}).get("model")
    if not model_id or "/" not in model_id:
        print(f"Not a Hugging Face repo id: {model_id!r}", file=sys.stderr)
        raise SystemExit(2)
    _download_repo_files(model_id, args.revision)


if __name__ == "__main__":
    main()
