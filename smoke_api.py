#!/usr/bin/env python3
"""
Smoke test for a running BloodConnect server.

Signs in with the demo accounts created by
``python manage.py ensure_demo_accounts`` and calls every API endpoint
for both roles, then prints a summary of failures.

    python smoke_api.py --base-url http://127.0.0.1:8000
"""
import argparse
import os
import sys
import time
from dataclasses import dataclass
from typing import Dict, List, Optional

import requests

DEFAULT_BASE_URL = os.getenv("BLOODCONNECT_URL", "http://127.0.0.1:8000")
DEMO_PASSWORD = os.getenv("DEMO_PASSWORD", "Donate@2024")

DEMO_USERS = {
    "donor": {"email": "donor@bloodconnect.local", "dashboard": "/donor/dashboard"},
    "hospital": {"email": "hospital@bloodconnect.local", "dashboard": "/hospital/dashboard"},
}


@dataclass
class CheckResult:
    success: bool
    endpoint: str
    method: str
    status_code: int
    response_time: float
    error_message: str = ""
    role: str = ""


class SmokeTester:
    def __init__(self, base_url: str, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.headers: Dict[str, str] = {}
        self.role: Optional[str] = None
        self.results: List[CheckResult] = []

    def _record(self, result: CheckResult) -> CheckResult:
        self.results.append(result)
        mark = "OK " if result.success else "ERR"
        print(f"[{mark}] {result.method} {result.endpoint} -> {result.status_code} ({result.response_time:.2f}s)")
        return result

    def call(self, method: str, endpoint: str, data: Optional[dict] = None, expected_status: int = 200,
             params: Optional[dict] = None) -> Optional[requests.Response]:
        start = time.time()
        try:
            response = self.session.request(method, f"{self.base_url}{endpoint}", json=data, params=params,
                                            headers=self.headers, timeout=self.timeout)
        except requests.RequestException as e:
            self._record(CheckResult(False, endpoint, method, 0, time.time() - start, str(e), self.role or ""))
            return None
        ok = response.status_code == expected_status
        self._record(CheckResult(ok, endpoint, method, response.status_code, time.time() - start,
                                 "" if ok else response.text[:200], self.role or ""))
        return response

    def login(self, role: str) -> bool:
        self.headers = {}
        self.role = role
        user = DEMO_USERS[role]
        resp = self.call("POST", "/api/auth/login", {"email": user["email"], "password": DEMO_PASSWORD})
        if resp is None or resp.status_code != 200:
            return False
        data = resp.json()
        if data.get("dashboard") != user["dashboard"]:
            print(f"    unexpected dashboard for {role}: {data.get('dashboard')}")
        self.headers = {"Authorization": f"Token {data['token']}"}
        return True

    def run_donor(self):
        if not self.login("donor"):
            return
        self.call("GET", "/api/auth/session")
        self.call("GET", "/api/requests")
        self.call("GET", "/api/requests", params={"bloodType": "O-", "sortBy": "urgent"})
        self.call("GET", "/api/requests", params={"bloodType": "XX"}, expected_status=400)
        self.call("GET", "/api/profile")
        self.call("GET", "/api/donors", expected_status=403)
        self.call("POST", "/api/auth/logout", {})

    def run_hospital(self):
        if not self.login("hospital"):
            return
        self.call("GET", "/api/hospital/requests")
        self.call("GET", "/api/donors", params={"bloodType": "all"})
        resp = self.call("POST", "/api/hospital/requests/create",
                         {"bloodType": "AB-", "unitsNeeded": 1, "urgencyLevel": "high", "description": "smoke test"},
                         expected_status=201)
        if resp is not None and resp.status_code == 201:
            request_id = resp.json()["data"]["id"]
            self.call("POST", "/api/hospital/requests/delete", {"id": request_id})
            self.call("POST", "/api/hospital/requests/delete", {"id": request_id}, expected_status=404)
        self.call("POST", "/api/auth/logout", {})

    def run(self) -> int:
        self.role = "anon"
        self.call("GET", "/healthz")
        self.call("GET", "/api/stats")
        self.run_donor()
        self.run_hospital()
        failures = [r for r in self.results if not r.success]
        print(f"\n{len(self.results) - len(failures)}/{len(self.results)} checks passed")
        for r in failures:
            print(f"  - [{r.role}] {r.method} {r.endpoint}: {r.status_code} {r.error_message}")
        return 1 if failures else 0


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--base-url", default=DEFAULT_BASE_URL)
    parser.add_argument("--timeout", type=float, default=10.0)
    args = parser.parse_args()
    sys.exit(SmokeTester(args.base_url, timeout=args.timeout).run())


if __name__ == "__main__":
    main()
