"""OpenAPI schema enrichment: collects metadata from flow components."""

from __future__ import annotations

from typing import Any

from middleware_lab.flow import ResolvedFlow


def collect_openapi_metadata(resolved: ResolvedFlow) -> dict[str, Any]:
    """Merge the OpenAPI fragments contributed by each resolved component.

    Responses for the same status code are merged by joining their
    descriptions, since several components can reject with e.g. 403.
    """
    result: dict[str, Any] = {}

    for component in resolved.components:
        spec = component.openapi_spec()
        if not spec:
            continue

        for key, value in spec.items():
            if key == "security_schemes":
                result.setdefault(key, {}).update(value)
            elif key == "security":
                security = result.setdefault(key, [])
                security.extend(sec for sec in value if sec not in security)
            elif key == "parameters":
                result.setdefault(key, []).extend(value)
            elif key == "responses":
                responses = result.setdefault(key, {})
                for code, resp in value.items():
                    if code in responses:
                        merged = responses[code]["description"]
                        if resp["description"] not in merged:
                            resp = {
                                **responses[code],
                                "description": f"{merged}; {resp['description']}",
                            }
                    responses[code] = resp
            elif key.startswith("x-") and isinstance(value, list):
                result.setdefault(key, []).extend(value)

    return result
