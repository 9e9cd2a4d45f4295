#!/usr/bin/env python3
"""
Generate the OpenAPI JSON specification of the Dealer Admin API.

The app is built without a database, so no connection settings are needed:
- Removes internal documentation endpoints
- Adds the X-Dealer-Id header security scheme
- Adds server information for different environments

Usage:
    python scripts/generate_openapi.py
    python scripts/generate_openapi.py --output custom_path.json
    python scripts/generate_openapi.py --env prod --pretty
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any

# Add src to path for imports
script_dir = Path(__file__).parent.absolute()
project_root = script_dir.parent
src_path = project_root / "src"
sys.path.insert(0, str(src_path))

from dealerhub_api.dependencies import DEALER_ID_HEADER  # noqa: E402
from dealerhub_api.main import create_app  # noqa: E402
from dealerhub_api.settings import Settings  # noqa: E402

ENVIRONMENT_SERVERS = {
    "dev": [
        {"url": "https://dealerhub-dev.example.com", "description": "Development environment"},
        {"url": "http://localhost:8000", "description": "Local development server"},
    ],
    "prod": [{"url": "https://dealerhub.example.com", "description": "Production environment"}],
}

INTERNAL_PATHS = ("/", "/docs", "/redoc", "/openapi.json")


def filter_internal_endpoints(openapi_spec: dict[str, Any]) -> dict[str, Any]:
    """Remove documentation endpoints that are not part of the API."""
    for path in INTERNAL_PATHS:
        openapi_spec.get("paths", {}).pop(path, None)
    return openapi_spec


def add_dealer_security(openapi_spec: dict[str, Any]) -> dict[str, Any]:
    """Declare the dealer identity header and require it outside /api/health."""
    openapi_spec.setdefault("components", {}).setdefault("securitySchemes", {})["dealerId"] = {
        "type": "apiKey",
        "name": DEALER_ID_HEADER,
        "in": "header",
        "description": "Identifier of the acting dealer",
    }

    for path, methods in openapi_spec.get("paths", {}).items():
        if path.startswith("/api/health"):
            continue
        for method, operation in methods.items():
            if method.lower() in ("get", "post", "put", "patch", "delete"):
                operation["security"] = [{"dealerId": []}]

    return openapi_spec


def generate_openapi_spec(env: str = "dev") -> dict[str, Any]:
    """Generate the complete OpenAPI specification."""
    print(f"Generating OpenAPI spec for environment: {env}")

    app = create_app(Settings(database_url=None, environment=env))
    openapi_spec = dict(app.openapi())

    openapi_spec = filter_internal_endpoints(openapi_spec)
    openapi_spec = add_dealer_security(openapi_spec)
    openapi_spec["servers"] = ENVIRONMENT_SERVERS.get(env, ENVIRONMENT_SERVERS["dev"])

    print(f"Generated OpenAPI spec with {len(openapi_spec.get('paths', {}))} endpoints")
    return openapi_spec


def main() -> None:
    """Main script entry point."""
    parser = argparse.ArgumentParser(description="Generate OpenAPI JSON for the Dealer Admin API")
    parser.add_argument("--output", "-o", default="openapi.json", help="Output file path (default: openapi.json)")
    parser.add_argument(
        "--env",
        "-e",
        choices=sorted(ENVIRONMENT_SERVERS),
        default="dev",
        help="Environment to generate spec for (default: dev)",
    )
    parser.add_argument("--pretty", "-p", action="store_true", help="Pretty print JSON output")
    args = parser.parse_args()

    openapi_spec = generate_openapi_spec(args.env)

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(openapi_spec, f, indent=2 if args.pretty else None, ensure_ascii=False)

    print(f"OpenAPI spec written to: {output_path.absolute()}")


if __name__ == "__main__":
    main()
