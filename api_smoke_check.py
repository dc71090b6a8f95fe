#!/usr/bin/env python3
"""
Smoke check for a running hospital ERP server.

Logs in with the demo accounts created by ``manage.py populate_data``
and calls the read endpoints every page of the front end depends on.
Exits non-zero when any call fails::

    python api_smoke_check.py --base-url http://127.0.0.1:8000
"""
import argparse
import os
import sys
import time
from dataclasses import dataclass
from typing import List, Optional

import requests

BASE_URL = os.getenv("BASE_URL", "http://127.0.0.1:8000")

TEST_USERS = {
    "admin": {"username": "admin", "password": "admin123"},
    "doctor": {"username": "drjohn", "password": "password123"},
}

READ_ENDPOINTS = [
    "/api/dashboard-stats",
    "/api/resource-utilization",
    "/api/patients",
    "/api/patients/recent",
    "/api/appointments/today",
    "/api/doctors",
    "/api/beds/available",
    "/api/admissions",
    "/api/inventory",
    "/api/inventory/low-stock",
    "/api/bills",
    "/api/services?active=true",
    "/api/service-orders/pending",
    "/api/lab-results",
    "/api/lab-sync-logs",
    "/api/accounts",
    "/api/pos/terminals/active",
    "/api/report-templates",
]


@dataclass
class CheckResult:
    success: bool
    endpoint: str
    method: str
    status_code: int
    response_time: float
    error_message: str = ""
    user_role: str = ""


class ApiSmokeChecker:
    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip("/")
        self.session = requests.Session()
        self.current_role: Optional[str] = None
        self.results: List[CheckResult] = []

    @property
    def errors(self) -> List[CheckResult]:
        return [r for r in self.results if not r.success]

    def call(self, method: str, endpoint: str, json=None, expected_status: int = 200) -> Optional[requests.Response]:
        start = time.time()
        try:
            response = self.session.request(method, f"{self.base_url}{endpoint}", json=json, timeout=10)
        except requests.RequestException as e:
            self.results.append(CheckResult(False, endpoint, method, 0, time.time() - start, str(e), self.current_role))
            print(f"FAIL {method} {endpoint}: {e}")
            return None

        elapsed = time.time() - start
        ok = response.status_code == expected_status
        self.results.append(CheckResult(ok, endpoint, method, response.status_code, elapsed,
                                        "" if ok else response.text[:200], self.current_role))
        print(f"{'ok  ' if ok else 'FAIL'} {method} {endpoint} {response.status_code} ({elapsed:.2f}s)")
        return response

    def login(self, role: str) -> bool:
        self.session = requests.Session()
        self.current_role = role
        response = self.call("POST", "/api/auth/login", json=TEST_USERS[role])
        if response is None or response.status_code != 200:
            return False
        self.session.headers["Authorization"] = f"Token {response.json()['token']}"
        return True

    def run(self) -> bool:
        anonymous = self.call("GET", "/api/patients", expected_status=401)
        if anonymous is not None and anonymous.status_code == 401:
            print("     anonymous access rejected")

        for role in TEST_USERS:
            print(f"\n== {role} ==")
            if not self.login(role):
                continue
            for endpoint in READ_ENDPOINTS:
                self.call("GET", endpoint)
            self.call("GET", "/api/auth/session")

        total = len(self.results)
        print(f"\n{total - len(self.errors)}/{total} calls succeeded")
        for r in self.errors:
            print(f"  [{r.user_role}] {r.method} {r.endpoint} -> {r.status_code} {r.error_message}")
        return not self.errors


def main():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--base-url", default=BASE_URL)
    args = parser.parse_args()
    sys.exit(0 if ApiSmokeChecker(args.base_url).run() else 1)


if __name__ == "__main__":
    main()
