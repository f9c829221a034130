"""
Data Loader Script - Loads students.json into the registry via the API.

Reads a JSON array of student objects and posts each one to POST /students
as form data. Each object may carry an "image_path" pointing at a local
jpg/png file to upload as the student's photo.

Usage:
    python load_students.py                              # Uses default URL
    python load_students.py http://localhost:8000         # Custom API URL
    python load_students.py http://backend:8000           # Inside Docker network
"""

import json
import os
import sys

import httpx

FORM_FIELDS = ("name", "email", "phone", "studentId", "address")


def student_form(record: dict) -> dict:
    """Build form fields for one student; subjects go as a JSON array string."""
    form = {field: str(record.get(field, "")) for field in FORM_FIELDS}
    form["subjects"] = json.dumps(record.get("subjects", []))
    return form


def load_students(client: httpx.Client, records: list) -> dict:
    """
    Post each record and tally the outcome.

    Returns:
        Dict with created, duplicates and failed counts plus per-record details
    """
    summary = {"created": 0, "duplicates": 0, "failed": 0, "details": []}

    for record in records:
        files = None
        image_path = record.get("image_path")
        if image_path:
            with open(image_path, "rb") as f:
                files = {"image": (os.path.basename(image_path), f.read())}

        resp = client.post("/students", data=student_form(record), files=files)
        label = record.get("studentId", "?")

        if resp.status_code == 201:
            summary["created"] += 1
            summary["details"].append({"studentId": label, "status": "CREATED",
                                       "id": resp.json().get("id")})
            continue

        error = resp.json().get("error", {}) if resp.headers.get("content-type", "").startswith(
            "application/json") else {}
        if error.get("code") == "DUPLICATE_IDENTITY":
            summary["duplicates"] += 1
            status = "DUPLICATE"
        else:
            summary["failed"] += 1
            status = "ERROR"
        summary["details"].append({"studentId": label, "status": status,
                                   "reason": error.get("message", resp.text)})

    return summary


def main():
    api_url = sys.argv[1] if len(sys.argv) > 1 else os.getenv("API_URL", "http://localhost:8000")

    # Locate the data file
    data_file = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "students.json")
    if not os.path.exists(data_file):
        data_file = "students.json"

    if not os.path.exists(data_file):
        print("Error: Could not find students.json")
        sys.exit(1)

    print(f"Loading data from: {data_file}")
    with open(data_file, 'r') as f:
        records = json.load(f)

    print(f"Found {len(records)} students to load")
    print(f"Sending to: {api_url}/students")
    print()

    with httpx.Client(base_url=api_url, timeout=30.0) as client:
        result = load_students(client, records)

    print("=" * 60)
    print("LOAD SUMMARY")
    print("=" * 60)
    print(f"  Created:     {result['created']}")
    print(f"  Duplicates:  {result['duplicates']}")
    print(f"  Failed:      {result['failed']}")
    print("=" * 60)
    print()

    for d in result["details"]:
        icon = '✅' if d["status"] == 'CREATED' else ('🔁' if d["status"] == 'DUPLICATE' else '❌')
        extra = f" ({d['reason']})" if d.get("reason") else ""
        print(f"  {icon} {d['studentId']}: {d['status']}{extra}")


if __name__ == "__main__":
    main()
