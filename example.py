"""Example usage of tolerantdiff."""

import json
from datetime import timedelta

from tolerantdiff import (
    ComparatorConfig,
    DeepEqualer,
    JSONDiffer,
    TolerantBasicEqualer,
    build_differ,
    make_substring_deleter,
)

# Old API response (legacy system)
old_response = {
    "id": "INV-001",
    "total": 100.00,
    "description": "Test Invoice (legacy)",
    "createdAt": "2025-02-02T10:30:00Z",
    "updatedAt": "2025-02-02T11:00:00Z",  # Will be ignored
    "metadata": {"traceId": "abc123"},  # Will be ignored
    "lineItems": [
        {"sku": "WIDGET-001", "quantity": 5, "unitPrice": 10.00},
        {"sku": "GADGET-002", "quantity": 2, "unitPrice": 25.50}
    ]
}

# New API response (new system)
new_response = {
    "id": "INV-001",
    "total": 100.004,  # Within tolerance
    "description": "Test Invoice (v2)",  # Suffix is stripped
    "createdAt": "2025-02-02T10:30:03Z",  # Within time tolerance
    "updatedAt": "2025-02-02T12:00:00Z",
    "metadata": {"traceId": "xyz789"},
    "lineItems": [
        {"sku": "WIDGET-001", "quantity": 5, "unitPrice": 10.0001},
        {"sku": "GADGET-002", "quantity": 3, "unitPrice": 25.50},  # Quantity changed
        {"sku": "GIZMO-003", "quantity": 1, "unitPrice": 5.00}  # Extra item
    ]
}


def main():
    # Deep comparison of Python values
    equaler = DeepEqualer(TolerantBasicEqualer(float_tolerance=0.1))
    print("Deep equal [1.6, 3.8] / [1.544, 3.89]:", equaler.equal([1.6, 3.8], [1.544, 3.89]))

    # JSON diff with an explicitly built comparator
    differ = JSONDiffer(
        TolerantBasicEqualer(
            float_tolerance=0.01,
            string_transformer=make_substring_deleter(r" \(.*\)$"),
            time_tolerance=timedelta(seconds=5),
        ),
        ignore_paths=["$.updatedAt", "$..traceId"],
    )
    result = differ.compare(json.dumps(old_response), json.dumps(new_response))

    print("=" * 60)
    print("TOLERANTDIFF COMPARISON RESULT")
    print("=" * 60)
    print(f"\nEqual: {not result.modified}")

    print("\nChanges:")
    for path, delta in result.leaves():
        print(f"  [{delta.kind.value}] {path}")

    print("\nDiff:")
    print(result.format(), end="")

    # Same comparison from a configuration
    config = ComparatorConfig(
        float_tolerance=0.01,
        time_tolerance="5s",
        strip_pattern=r" \(.*\)$",
        ignore_paths=["$.updatedAt", "$..traceId", "$.lineItems[2]"],
    )
    configured = build_differ(config).compare_values(old_response, new_response)

    print("\n" + "=" * 60)
    print("FULL JSON REPORT (configured)")
    print("=" * 60)
    print(json.dumps(configured.to_dict(), indent=2))


if __name__ == "__main__":
    main()
