# api/scripts/eval_receipts.py
"""
Run the extractors over a folder of receipt samples and compare with expected.csv.

    python api/scripts/eval_receipts.py api/tests/fixtures/receipts

.txt samples are parsed as-is; images go through the configured OCR backend.
"""
import os, argparse, csv, sys
sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), ".."))
from receiptapi.parsers.router import parse_any

KEYS = ["vendor", "reference_id", "date", "amount", "transaction_type"]

def load_expected(base: str):
    exp = {}
    path = os.path.join(base, "expected.csv")
    if not os.path.exists(path):
        return exp
    with open(path, newline="", encoding="utf-8") as f:
        for row in csv.DictReader(f):
            exp[row["file"]] = row
    return exp

def _norm(s):
    return ("" if s is None else str(s)).strip()

def _num_or_none(s):
    try:
        return round(float(str(s).replace(",", "").strip()), 2)
    except ValueError:
        return None

def _match_field(exp, got, *, numeric=False, casefold=False):
    # blank expected means the field must be missing
    exp = _norm(exp)
    got = _norm(got)
    if numeric and exp and got:
        return _num_or_none(exp) == _num_or_none(got)
    if casefold:
        return got.lower() == exp.lower()
    return got == exp

def main():
    p = argparse.ArgumentParser()
    p.add_argument("path", help="File or directory of samples")
    args = p.parse_args()

    base = args.path
    files = []
    if os.path.isdir(base):
        for f in sorted(os.listdir(base)):
            fp = os.path.join(base, f)
            if os.path.isfile(fp) and f != "expected.csv":
                files.append(fp)
    else:
        files = [base]
        base = os.path.dirname(base) or "."

    expected = load_expected(base)

    print(",".join(["file"] + KEYS + ["ok"]))
    ok_total = 0

    for fp in files:
        name = os.path.basename(fp)
        with open(fp, "rb") as fh:
            data = fh.read()

        result, _meta, _vendor = parse_any(name, data)
        row = {"file": name}
        row.update({k: _norm(result.get(k)) for k in KEYS})

        exp_row = expected.get(name)
        is_ok = ""
        if exp_row:
            checks = [
                _match_field(exp_row.get("vendor"), row["vendor"], casefold=True),
                _match_field(exp_row.get("reference_id"), row["reference_id"]),
                _match_field(exp_row.get("date"), row["date"]),
                _match_field(exp_row.get("amount"), row["amount"], numeric=True),
                _match_field(exp_row.get("transaction_type"), row["transaction_type"]),
            ]
            is_ok = "pass" if all(checks) else "FAIL"
            if is_ok == "pass":
                ok_total += 1

        print(",".join([row["file"]] + [row[k] for k in KEYS] + [is_ok]))

    if expected:
        print(f"Summary: {ok_total}/{len(expected)} passing")

if __name__ == "__main__":
    main()
