from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from studyaid.modules.flashcards.parser import extract_flashcards
from studyaid.modules.key_terms.parser import extract_key_terms
from studyaid.modules.quiz.parser import extract_quiz


def _load_text(args: argparse.Namespace) -> str:
    if args.text and args.file:
        raise SystemExit("Provide either --text or --file, not both")
    if args.file:
        if args.file == "-":
            return sys.stdin.read()
        return Path(args.file).read_text(encoding="utf-8")
    if args.text:
        return args.text
    raise SystemExit("--text or --file is required")


def _add_source_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--text", "-t", help="Generated text to parse")
    p.add_argument("--file", "-f", help="Path to a file with generated text ('-' for stdin)")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="studyaid-extract",
        description="Parse generated study text into quiz questions, flashcards or key terms",
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    _add_source_args(sub.add_parser("quiz", help="Extract multiple-choice questions"))
    _add_source_args(sub.add_parser("flashcards", help="Extract Q/A flashcards"))
    kt = sub.add_parser("key-terms", help="Extract term/definition pairs")
    _add_source_args(kt)
    kt.add_argument(
        "--plain", action="store_true", help="Print a plain-text rendering instead of JSON"
    )

    args = parser.parse_args(argv)
    text = _load_text(args)

    if args.cmd == "quiz":
        questions = extract_quiz(text)
        print(json.dumps([q.model_dump(mode="json") for q in questions], indent=2))
        return 0 if questions else 1
    if args.cmd == "flashcards":
        cards = extract_flashcards(text)
        print(json.dumps([c.model_dump(mode="json") for c in cards], indent=2))
        return 0 if cards else 1
    if args.cmd == "key-terms":
        result = extract_key_terms(text)
        if args.plain:
            print(result.to_text())
        else:
            print(json.dumps(result.model_dump(mode="json"), indent=2, ensure_ascii=False))
        return 0 if result.structured else 1

    parser.print_help()
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
