"""
jsonmend demonstration script.
"""

import logging

import jsonmend


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("jsonmend - Model Output Repair Demo")
    print("=" * 40)

    examples = [
        # Token budget ran out inside a string
        ('{"summary": "Intro to OS\nThe kernel is', "Truncated mid-string"),
        # Two structures left open
        ('[{"q":"a"},{"q":"b"', "Truncated list of objects"),
        # Commentary after the payload
        ('{"a":1}   garbage after', "Trailing commentary"),
        # Fenced and chatty
        (
            'Here are your flashcards:\n```json\n[{"front": "CPU", "back": "Processor"}]\n```',
            "Markdown code fence",
        ),
        # Cut right after a key
        ('{"question": "Define deadlock", "answer":', "Dangling key"),
        # Hallucinated bracket
        ('{"items": [1, 2}]}', "Mismatched closer"),
        # Nothing to salvage
        ("Sorry, I cannot help with that.", "No structure"),
        # Balanced but still invalid
        ('{"answer": undefined}', "Unrepairable literal"),
    ]

    for i, (raw, description) in enumerate(examples, 1):
        print(f"\n{i}. {description}")
        print(f"Input:  {raw!r}")

        try:
            report = jsonmend.loads_with_report(raw)
            print(f"Text:   {report.text}")
            print(f"Value:  {report.value}")
            print(f"Report: {report.summary()}")
        except jsonmend.RepairError as e:
            print(f"Error:  {type(e).__name__}: {e}")


if __name__ == "__main__":
    main()
