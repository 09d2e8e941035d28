"""Architectural boundary tests for the metrics pipeline.

These tests use AST parsing to verify import boundaries are maintained:
1. The metrics core must never import from pizza_metrics.api or web frameworks
2. The chaos flag must not import the metrics package (the registry imports it)
3. Common must never import from pizza_metrics.api or pizza_metrics.metrics

This keeps collectors usable from any request-handling layer.
"""
import ast
from pathlib import Path
from typing import List, Set


PROJECT_ROOT = Path(__file__).parent.parent.parent
PACKAGE_ROOT = PROJECT_ROOT / "pizza_metrics"


def get_python_files(directory: Path) -> List[Path]:
    """Return all .py files in directory recursively."""
    return list(directory.rglob("*.py"))


def extract_imports(file_path: Path) -> Set[str]:
    """Extract all import module paths from a Python file using AST."""
    with open(file_path, "r", encoding="utf-8") as f:
        tree = ast.parse(f.read(), filename=str(file_path))

    imports = set()

    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                imports.add(alias.name)
        elif isinstance(node, ast.ImportFrom):
            if node.module and node.level == 0:
                imports.add(node.module)

    return imports


def _violations(files: List[Path], forbidden_prefixes: Set[str]) -> List[str]:
    violations = []
    for file_path in files:
        for imp in extract_imports(file_path):
            for forbidden in forbidden_prefixes:
                if imp == forbidden or imp.startswith(forbidden + "."):
                    violations.append(
                        f"{file_path.relative_to(PROJECT_ROOT)}: imports forbidden {imp}"
                    )
    return violations


def test_metrics_core_never_imports_web_layer():
    """pizza_metrics.metrics must not depend on the API layer."""
    violations = _violations(
        get_python_files(PACKAGE_ROOT / "metrics"),
        {"pizza_metrics.api", "fastapi", "starlette"},
    )

    assert not violations, "\n".join([
        "Metrics core imports the web layer (forbidden):",
        *violations
    ])


def test_chaos_never_imports_metrics_package():
    """The registry imports the chaos flag, so the reverse would be circular."""
    violations = _violations([PACKAGE_ROOT / "chaos.py"], {"pizza_metrics.metrics"})

    assert not violations, "\n".join([
        "Chaos flag imports the metrics package (forbidden):",
        *violations
    ])


def test_common_never_imports_from_api_or_metrics():
    """Common modules must never import from pizza_metrics.api or pizza_metrics.metrics"""
    violations = _violations(
        get_python_files(PACKAGE_ROOT / "common"),
        {"pizza_metrics.api", "pizza_metrics.metrics"},
    )

    assert not violations, "\n".join([
        "Common imports from api/metrics (forbidden):",
        *violations
    ])
