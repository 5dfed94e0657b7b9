#!/usr/bin/env python3
"""
Test Coverage Analysis Script
Walks test_comprehensive.py and reports how the booking core tests are spread
across layers and markers
"""

import ast
from typing import Dict, List, Set
from collections import defaultdict
from pathlib import Path


# test class -> (category, subcategory)
CLASS_CATEGORIES = {
    'TestMoney': ('Domain Layer', 'Value Objects'),
    'TestDateRange': ('Domain Layer', 'Value Objects'),
    'TestReservationEntity': ('Domain Layer', 'Entities'),
    'TestResourceEntities': ('Domain Layer', 'Entities'),
    'TestErrorTaxonomy': ('Domain Layer', 'Errors'),
    'TestAvailabilityEngine': ('Application', 'AvailabilityEngine'),
    'TestPerResourcePolicy': ('Application', 'AvailabilityEngine'),
    'TestReservationService': ('Application', 'ReservationService'),
    'TestRoomService': ('Application', 'RoomService'),
    'TestTableService': ('Application', 'TableService'),
    'TestBusinessService': ('Application', 'BusinessService'),
    'TestInMemoryRepositories': ('Infrastructure', 'Repositories'),
    'TestConfigAndWiring': ('Infrastructure', 'Config & Wiring'),
    'TestCoverageAnalyzer': ('Infrastructure', 'Tooling'),
    'TestConcurrency': ('Specialized', 'Concurrency'),
    'TestBookingFlow': ('Specialized', 'Integration'),
}

LAYER_BARS = ['Domain Layer', 'Application', 'Infrastructure', 'Specialized']


class SuiteAnalyzer:
    """Analyzer for test files to extract coverage statistics"""

    def __init__(self):
        self.test_classes = defaultdict(list)
        self.test_markers = defaultdict(set)
        self.total_tests = 0
        self.categories: Dict[str, Dict[str, List[str]]] = defaultdict(lambda: defaultdict(list))
        self.uncategorized: List[str] = []

    def analyze_file(self, filepath: str):
        """Parse Python test file and extract test information"""
        with open(filepath, 'r', encoding='utf-8') as f:
            tree = ast.parse(f.read())

        for node in ast.walk(tree):
            if isinstance(node, ast.ClassDef):
                self._analyze_class(node)

    def _analyze_class(self, class_node):
        class_name = class_node.name

        for item in class_node.body:
            # Sync and async tests alike
            if isinstance(item, (ast.FunctionDef, ast.AsyncFunctionDef)) and item.name.startswith('test_'):
                self.total_tests += 1
                markers = self._extract_markers(item)

                self.test_classes[class_name].append({
                    'name': item.name,
                    'markers': markers
                })
                for marker in markers:
                    self.test_markers[marker].add(f"{class_name}.{item.name}")

                self._categorize_test(class_name, item.name, markers)

    def _extract_markers(self, func_node) -> Set[str]:
        """Extract pytest markers from function decorators"""
        markers = set()
        for decorator in func_node.decorator_list:
            target = decorator.func if isinstance(decorator, ast.Call) else decorator
            if (isinstance(target, ast.Attribute)
                    and isinstance(target.value, ast.Attribute)
                    and isinstance(target.value.value, ast.Name)
                    and target.value.value.id == 'pytest'
                    and target.value.attr == 'mark'
                    and target.attr != 'parametrize'):
                markers.add(target.attr)
        return markers

    def _categorize_test(self, class_name: str, test_name: str, markers: Set[str]):
        test_id = f"{class_name}.{test_name}"

        if class_name in CLASS_CATEGORIES:
            category, subcategory = CLASS_CATEGORIES[class_name]
            self.categories[category][subcategory].append(test_id)
        else:
            self.uncategorized.append(test_id)

        if 'edge_case' in markers and test_id not in self.categories['Specialized']['Edge Cases']:
            self.categories['Specialized']['Edge Cases'].append(test_id)

    def _percentage(self, count: int) -> float:
        if not self.total_tests:
            return 0.0
        return count / self.total_tests * 100

    def _bar(self, count: int, width: int = 20) -> str:
        filled = round(self._percentage(count) / 100 * width)
        return '█' * filled + '░' * (width - filled)

    def generate_report(self) -> str:
        """Generate markdown report"""
        report = []
        report.append("# 📊 Unit Testing Coverage Report\n")
        report.append("**Booking Core - Test Distribution**\n")
        report.append(f"**Generated:** {Path.cwd().name}\n")
        report.append("---\n")

        report.append("## 🎯 Test Inventory\n")
        report.append(f"### **{self.total_tests} test functions in {len(self.test_classes)} classes**\n")
        report.append("Parametrized cases count once per function. Run pytest for pass/fail results.\n")

        report.append("## 📈 Coverage by Category\n")
        for category_name, subcategories in self.categories.items():
            category_total = sum(len(tests) for tests in subcategories.values())
            if category_total == 0:
                continue
            report.append(f"\n### {category_name}\n")
            report.append(f"**Total: {category_total} tests ({self._percentage(category_total):.1f}% of total)**\n")
            for subcat_name, tests in subcategories.items():
                if tests:
                    report.append(f"- **{subcat_name}**: {len(tests)} tests ({self._percentage(len(tests)):.1f}%)\n")

        report.append("\n## 🏗️ Test Distribution by Architectural Layer\n")
        report.append("```")
        for layer in LAYER_BARS:
            layer_total = sum(len(tests) for tests in self.categories[layer].values())
            report.append(f"{layer:<22}: {self._bar(layer_total)} {layer_total} tests "
                          f"({self._percentage(layer_total):.1f}%)")
        report.append("```\n")

        report.append("## 🏷️ Test Markers Distribution\n")
        marker_counts = {marker: len(tests) for marker, tests in self.test_markers.items()}
        for marker, count in sorted(marker_counts.items(), key=lambda x: x[1], reverse=True):
            report.append(f"- `@pytest.mark.{marker}`: {count} tests ({self._percentage(count):.1f}%)\n")

        report.append("\n## 📋 Detailed Test Breakdown\n")
        for category_name, subcategories in self.categories.items():
            if not any(subcategories.values()):
                continue
            report.append(f"\n### {category_name}\n")
            for subcat_name, tests in subcategories.items():
                if tests:
                    report.append(f"\n#### {subcat_name} ({len(tests)} tests)\n")
                    for test_id in tests:
                        test_display = test_id.replace('Test', '', 1).replace('.test_', ' → ')
                        report.append(f"- {test_display}\n")

        if self.uncategorized:
            report.append("\n### Uncategorized\n")
            for test_id in self.uncategorized:
                report.append(f"- {test_id}\n")

        report.append("\n## ✨ Coverage Areas\n")
        report.append("✅ **Domain Layer**\n")
        report.append("  - Value Objects (Money, DateRange)\n")
        report.append("  - Entities (Reservation state machine, Business, Room, Table)\n")
        report.append("  - Error families (validation, not found, domain rule)\n")
        report.append("\n✅ **Application**\n")
        report.append("  - AvailabilityEngine (free pool, single-unit checks, occupancy, conflict policies)\n")
        report.append("  - ReservationService (Create, Confirm, Cancel, Complete, Queries)\n")
        report.append("  - RoomService / TableService (Pool management, Revenue)\n")
        report.append("\n✅ **Infrastructure**\n")
        report.append("  - In-memory repositories (overlap lookup, typed updates)\n")
        report.append("  - Settings, logging setup and service wiring\n")
        report.append("\n✅ **Specialized Testing**\n")
        report.append("  - Concurrency (interleaved create calls)\n")
        report.append("  - Edge Cases (touching ranges, empty pools, unclamped occupancy)\n")

        report.append("\n---\n")
        report.append("*Report generated by analyze_test_coverage.py*\n")

        return '\n'.join(report)


def main():
    analyzer = SuiteAnalyzer()

    test_file = Path(__file__).parent / 'test_comprehensive.py'

    if not test_file.exists():
        print(f"Error: {test_file} not found!")
        return

    print("🔍 Analyzing test files...")
    analyzer.analyze_file(str(test_file))

    print(f"✅ Found {analyzer.total_tests} tests")
    print("📊 Generating coverage report...")

    report = analyzer.generate_report()

    report_file = Path(__file__).parent / 'TEST_COVERAGE_REPORT.md'
    with open(report_file, 'w', encoding='utf-8') as f:
        f.write(report)

    print(f"✨ Coverage report saved to: {report_file}")
    print(f"\n{'='*70}")
    print(f"{'SUMMARY':^70}")
    print(f"{'='*70}")
    print(f"Total Tests: {analyzer.total_tests}")
    print(f"Uncategorized: {len(analyzer.uncategorized)}")
    print(f"Report: {report_file.name}")
    print(f"{'='*70}\n")


if __name__ == '__main__':
    main()
