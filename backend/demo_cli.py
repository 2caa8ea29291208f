#!/usr/bin/env python3
"""
Cardiovascular Risk Scoring - Demo CLI

Scores a sample patient (or a patient described in a JSON file) with
every calculator and prints the results.

Usage:
    python demo_cli.py --sample                 # Score the sample patient
    python demo_cli.py --file patient.json      # Score a patient from JSON
    python demo_cli.py --score heart --param history=2 --param ecg=1 ...
    python demo_cli.py --list                   # List calculators
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from cardio_risk.services import (
    CACScoreInput,
    CardiovascularRiskFactors,
    InMemoryScoreStore,
    LipidProfile,
    PatientDemographics,
    RiskScoreResult,
    get_cardiology_risk_service,
)

# ============================================================================
# Sample Patient
# ============================================================================

# One JSON-compatible mapping per calculator, plus the comprehensive inputs
SAMPLE_PATIENT = {
    "patient_id": "DEMO-001",
    "organization_id": "DEMO-ORG",
    "scores": {
        "framingham": {
            "age": 62, "sex": "male", "total_cholesterol": 235, "hdl_cholesterol": 38,
            "systolic_bp": 148, "is_smoker": True, "is_on_bp_medication": True,
            "ldl_cholesterol": 160, "bmi": 29.4,
        },
        "ascvd": {
            "age": 62, "sex": "male", "race": "white", "total_cholesterol": 235,
            "hdl_cholesterol": 38, "systolic_bp": 148, "is_smoker": True,
            "is_on_bp_medication": True, "ldl_cholesterol": 160, "triglycerides": 210,
        },
        "cac": {"agatston_score": 180, "age": 62, "sex": "male", "percentile": 68},
        "heart": {"history": 2, "ecg": 1, "age": 1, "risk_factors": 2, "troponin": 0},
        "cha2ds2_vasc": {"age": 62, "sex": "male", "hypertension": True},
        "has_bled": {"hypertension": True, "drugs_alcohol": True},
        "timi": {"at_least_3_cad_risk_factors": True, "aspirin_use_last_7_days": True},
        "grace": {"age": 62, "heart_rate": 88, "systolic_bp": 148, "creatinine": 1.1},
    },
    "comprehensive": {
        "demographics": {"age": 62, "sex": "male", "race": "white"},
        "lipids": {"total_cholesterol": 235, "hdl_cholesterol": 38, "ldl_cholesterol": 160},
        "risk_factors": {"systolic_bp": 148, "on_bp_medication": True, "smoker": True},
        "cac": {"agatston_score": 180},
    },
}

# ============================================================================
# Terminal Output
# ============================================================================

class Colors:
    """ANSI color codes for terminal output."""
    BLUE = '\033[94m'
    CYAN = '\033[96m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    BOLD = '\033[1m'
    END = '\033[0m'
    GRAY = '\033[90m'

CATEGORY_COLORS = {
    "very_low": Colors.GREEN,
    "low": Colors.GREEN,
    "borderline": Colors.YELLOW,
    "moderate": Colors.YELLOW,
    "intermediate": Colors.YELLOW,
    "high": Colors.RED,
    "very_high": Colors.RED,
}

def print_header(text: str, char: str = "="):
    """Print a formatted header."""
    width = 80
    print()
    print(f"{Colors.BOLD}{Colors.CYAN}{char * width}{Colors.END}")
    print(f"{Colors.BOLD}{Colors.CYAN}{text.center(width)}{Colors.END}")
    print(f"{Colors.BOLD}{Colors.CYAN}{char * width}{Colors.END}")

def print_subheader(text: str):
    """Print a formatted subheader."""
    print()
    print(f"{Colors.BOLD}{Colors.YELLOW}{'─' * 80}{Colors.END}")
    print(f"{Colors.BOLD}{Colors.YELLOW}  {text}{Colors.END}")
    print(f"{Colors.BOLD}{Colors.YELLOW}{'─' * 80}{Colors.END}")

def print_item(label: str, value: str, indent: int = 2):
    """Print a labeled item."""
    spaces = " " * indent
    print(f"{spaces}{Colors.GRAY}{label}:{Colors.END} {value}")

def print_error(text: str):
    """Print error message."""
    print(f"  {Colors.RED}✗{Colors.END} {text}")

def display_result(result: RiskScoreResult):
    """Print one calculator result."""
    category = result.risk_category.value
    color = CATEGORY_COLORS.get(category, Colors.END)

    print_subheader(result.score_name)
    print_item("Score", f"{result.score:g}")
    print_item("Risk", f"{result.risk_percentage:.1f}%")
    print_item("Category", f"{color}{category}{Colors.END}")
    print_item("Interpretation", result.interpretation)

    if result.components:
        print(f"  {Colors.BOLD}Components:{Colors.END}")
        for name, points in result.components.items():
            print(f"    {name:30s} {points:+d}")
    if result.clinical_notes:
        print(f"  {Colors.BOLD}Notes:{Colors.END}")
        for note in result.clinical_notes:
            print(f"    {Colors.BLUE}•{Colors.END} {note}")
    if result.recommendations:
        print(f"  {Colors.BOLD}Recommendations:{Colors.END}")
        for rec in result.recommendations:
            print(f"    {Colors.GREEN}→{Colors.END} {rec}")

# ============================================================================
# Scoring
# ============================================================================

def score_patient(patient: dict[str, Any]):
    """Run, store and display every calculator configured for a patient."""
    service = get_cardiology_risk_service()
    store = InMemoryScoreStore()
    patient_id = patient.get("patient_id", "DEMO-001")
    organization_id = patient.get("organization_id", "DEMO-ORG")

    for score_type, params in patient.get("scores", {}).items():
        try:
            calculation = service.calculate_and_store(
                store, score_type, patient_id, organization_id, "demo_cli", **params
            )
        except ValueError as e:
            print_error(f"{score_type}: {e}")
            continue
        display_result(calculation.result)

    comprehensive = patient.get("comprehensive")
    if comprehensive:
        assessment = service.calculate_comprehensive(
            demographics=PatientDemographics(**comprehensive["demographics"]),
            lipids=LipidProfile(**comprehensive["lipids"]) if comprehensive.get("lipids") else None,
            risk_factors=(
                CardiovascularRiskFactors(**comprehensive["risk_factors"])
                if comprehensive.get("risk_factors") else None
            ),
            cac=CACScoreInput(**comprehensive["cac"]) if comprehensive.get("cac") else None,
        )
        print_subheader("Comprehensive Assessment")
        for line in assessment.summary:
            print(f"  {Colors.CYAN}•{Colors.END} {line}")

    print_subheader("Stored History")
    for record in store.get_history(patient_id, organization_id, limit=20):
        print(f"  {record.score_type.value:14s} {record.score_value:>7g}  {record.risk_category.value}")

def parse_params(pairs: list[str]) -> dict[str, Any]:
    """Parse key=value pairs; values are decoded as JSON when possible."""
    params = {}
    for pair in pairs:
        key, _, raw = pair.partition("=")
        try:
            params[key] = json.loads(raw)
        except json.JSONDecodeError:
            params[key] = raw
    return params

# ============================================================================
# Main Entry Point
# ============================================================================

def main():
    parser = argparse.ArgumentParser(
        description="Cardiovascular Risk Scoring - Demo CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python demo_cli.py --sample                   # Score the sample patient
  python demo_cli.py --file patient.json        # Score a patient from JSON
  python demo_cli.py --score timi --param st_deviation_05mm=true
  python demo_cli.py --list                     # List calculators
"""
    )
    parser.add_argument('--file', '-f', help='Path to patient JSON file')
    parser.add_argument('--sample', '-s', action='store_true', help='Score the sample patient')
    parser.add_argument('--score', help='Run a single calculator')
    parser.add_argument('--param', '-p', action='append', default=[], help='Calculator parameter key=value')
    parser.add_argument('--list', '-l', action='store_true', help='List available calculators')

    args = parser.parse_args()
    service = get_cardiology_risk_service()

    if args.list:
        print_header("AVAILABLE CALCULATORS")
        for name, description in service.get_available_calculators().items():
            print_item(name, description)
    elif args.score:
        try:
            result = service.calculate(args.score, **parse_params(args.param))
        except ValueError as e:
            print(f"Error: {e}")
            sys.exit(1)
        display_result(result)
    elif args.file:
        path = Path(args.file)
        if not path.exists():
            print(f"Error: File not found: {args.file}")
            sys.exit(1)

        print_header(f"SCORING: {path.name}")
        score_patient(json.loads(path.read_text()))
    else:
        print_header("SCORING SAMPLE PATIENT")
        score_patient(SAMPLE_PATIENT)

if __name__ == "__main__":
    main()
