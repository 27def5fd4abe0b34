from __future__ import annotations

DEPARTMENT_NAMES = [
    "Backend",
    "Frontend",
    "Mobile",
    "QA",
    "DevOps",
]

SPECIALIZATION_COMPETENCIES: dict[str, list[str]] = {
    "Python": [
        "Async IO",
        "Packaging",
        "Typing",
        "Testing with pytest",
    ],
    "Databases": [
        "SQL query tuning",
        "Schema migrations",
        "Transactions and isolation",
    ],
    "JavaScript": [
        "Event loop",
        "Modules and bundling",
        "TypeScript",
    ],
    "Infrastructure": [
        "Containers",
        "CI pipelines",
        "Observability",
    ],
}
