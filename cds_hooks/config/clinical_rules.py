# -*- coding: utf-8 -*-
"""
Clinical knowledge tables.

All rule content lives here as plain data; the matchers in ``cds_hooks.rules``
never hard-code a drug or diagnosis. Medication tokens are written the way a
clinician would type them and are normalized by the matchers before use.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from cds_hooks.config.constants import (
    GUIDELINE_SOURCES,
    INDICATOR_CRITICAL,
    INDICATOR_INFO,
    INDICATOR_WARNING,
)


# =========================
# Record types
# =========================

@dataclass(frozen=True)
class InteractionRule:
    drug_a: str
    drug_b: str
    severity: str
    description: str
    mechanism: str


@dataclass(frozen=True)
class ContraindicationRule:
    medications: Tuple[str, ...]
    severity: str
    description: str


@dataclass(frozen=True)
class LabPrerequisite:
    lab: str
    rationale: str


@dataclass(frozen=True)
class RecommendedAction:
    description: str
    type: str  # order | referral | education | monitoring


@dataclass(frozen=True)
class ConditionRule:
    """Care-plan recommendation triggered by an active coded condition.

    ``description`` may use ``{condition}`` for the condition display text.
    """

    id: str
    code_system: str  # icd-10 | snomed
    code_prefix: str
    title: str
    description: str
    indicator: str
    rationale: str
    source: Dict[str, str]
    actions: Tuple[RecommendedAction, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ScreeningRule:
    id: str
    title: str
    description: str
    min_age: int
    max_age: int
    indicator: str
    rationale: str
    source: Dict[str, str]
    gender: Optional[str] = None


# =========================
# Allergy cross-reactivity
# =========================

CROSS_REACTIVITY: Dict[str, Tuple[str, ...]] = {
    # Penicillins
    "penicillin": ("amoxicillin", "ampicillin", "augmentin", "piperacillin", "dicloxacillin", "nafcillin"),
    "amoxicillin": ("penicillin", "ampicillin", "augmentin"),
    "ampicillin": ("penicillin", "amoxicillin"),
    # Cephalosporins
    "cephalexin": ("cefazolin", "ceftriaxone", "cefdinir"),
    "cephalosporin": ("cephalexin", "cefazolin", "ceftriaxone", "cefdinir", "cefepime"),
    # Sulfonamides
    "sulfa": ("sulfamethoxazole", "bactrim", "septra", "sulfasalazine"),
    "sulfamethoxazole": ("sulfa", "bactrim", "septra"),
    # NSAIDs
    "aspirin": ("ibuprofen", "naproxen", "nsaid", "meloxicam", "diclofenac", "ketorolac"),
    "ibuprofen": ("aspirin", "naproxen", "nsaid", "advil", "motrin"),
    "naproxen": ("aspirin", "ibuprofen", "nsaid", "aleve"),
    "nsaid": ("aspirin", "ibuprofen", "naproxen", "meloxicam", "diclofenac", "ketorolac", "indomethacin"),
    # ACE inhibitors
    "lisinopril": ("enalapril", "ramipril", "benazepril", "ace inhibitor", "captopril"),
    "ace inhibitor": ("lisinopril", "enalapril", "benazepril", "ramipril", "captopril"),
    # Statins
    "atorvastatin": ("simvastatin", "rosuvastatin", "statin", "pravastatin", "lovastatin"),
    "statin": ("atorvastatin", "simvastatin", "rosuvastatin", "pravastatin", "lovastatin"),
    # Opioids
    "codeine": ("morphine", "hydrocodone", "oxycodone", "tramadol"),
    "morphine": ("codeine", "hydrocodone", "oxycodone", "hydromorphone"),
}


# =========================
# Drug-drug interactions
# =========================

_NSAID_WARFARIN = "NSAIDs increase bleeding risk and may affect warfarin metabolism"
_NSAID_WARFARIN_MECH = "NSAIDs inhibit platelet function and may displace warfarin from protein binding"
_SEROTONIN = "Increased risk of serotonin syndrome with concurrent use"
_SEROTONIN_MECH = "Both medications increase serotonin activity"
_QT = "Additive QT prolongation risk. Consider alternative antibiotic."
_QT_MECH = "Both medications prolong QT interval"

DRUG_INTERACTIONS: Tuple[InteractionRule, ...] = (
    # Anticoagulants
    InteractionRule(
        "warfarin", "aspirin", INDICATOR_CRITICAL,
        "Increased bleeding risk with concurrent anticoagulant and antiplatelet therapy",
        "Additive anticoagulant effect",
    ),
    InteractionRule("warfarin", "ibuprofen", INDICATOR_CRITICAL, _NSAID_WARFARIN, _NSAID_WARFARIN_MECH),
    InteractionRule("warfarin", "naproxen", INDICATOR_CRITICAL, _NSAID_WARFARIN, _NSAID_WARFARIN_MECH),
    InteractionRule(
        "warfarin", "fluconazole", INDICATOR_CRITICAL,
        "Fluconazole inhibits warfarin metabolism, significantly increasing INR",
        "CYP2C9 inhibition",
    ),
    InteractionRule(
        "warfarin", "metronidazole", INDICATOR_WARNING,
        "Metronidazole may increase warfarin effect",
        "CYP inhibition",
    ),
    # Statins
    InteractionRule(
        "simvastatin", "amiodarone", INDICATOR_CRITICAL,
        "Increased risk of rhabdomyolysis. Simvastatin dose should not exceed 20mg daily.",
        "CYP3A4 inhibition increases simvastatin levels",
    ),
    InteractionRule(
        "atorvastatin", "clarithromycin", INDICATOR_WARNING,
        "Macrolide antibiotics may increase statin levels and myopathy risk",
        "CYP3A4 inhibition",
    ),
    InteractionRule(
        "simvastatin", "amlodipine", INDICATOR_WARNING,
        "Simvastatin dose should not exceed 20mg daily with amlodipine",
        "CYP3A4 inhibition",
    ),
    # ACE inhibitors
    InteractionRule(
        "lisinopril", "spironolactone", INDICATOR_WARNING,
        "Risk of hyperkalemia with concurrent ACE inhibitor and potassium-sparing diuretic",
        "Both medications can increase serum potassium",
    ),
    InteractionRule(
        "lisinopril", "potassium", INDICATOR_WARNING,
        "Risk of hyperkalemia with concurrent ACE inhibitor and potassium supplementation",
        "Both medications can increase serum potassium",
    ),
    # Metformin
    InteractionRule(
        "metformin", "contrast", INDICATOR_WARNING,
        "Hold metformin before and after IV contrast procedures",
        "Risk of lactic acidosis with renal impairment from contrast",
    ),
    # Digoxin
    InteractionRule(
        "digoxin", "amiodarone", INDICATOR_WARNING,
        "Amiodarone increases digoxin levels. Consider 50% dose reduction.",
        "P-glycoprotein inhibition reduces digoxin clearance",
    ),
    InteractionRule(
        "digoxin", "verapamil", INDICATOR_WARNING,
        "Verapamil increases digoxin levels and additive AV nodal blocking effect",
        "P-glycoprotein inhibition and pharmacodynamic interaction",
    ),
    # Fluoroquinolones
    InteractionRule(
        "ciprofloxacin", "theophylline", INDICATOR_WARNING,
        "Ciprofloxacin inhibits theophylline metabolism, risk of toxicity",
        "CYP1A2 inhibition",
    ),
    InteractionRule(
        "levofloxacin", "antacid", INDICATOR_INFO,
        "Antacids reduce fluoroquinolone absorption. Separate doses by 2 hours.",
        "Chelation reduces absorption",
    ),
    # Serotonergic
    InteractionRule("ssri", "tramadol", INDICATOR_WARNING, _SEROTONIN, _SEROTONIN_MECH),
    InteractionRule("sertraline", "tramadol", INDICATOR_WARNING, _SEROTONIN, _SEROTONIN_MECH),
    # QT prolongation
    InteractionRule("azithromycin", "amiodarone", INDICATOR_CRITICAL, _QT, _QT_MECH),
    InteractionRule("ciprofloxacin", "amiodarone", INDICATOR_CRITICAL, _QT, _QT_MECH),
)


# =========================
# Condition contraindications (ICD-10 3-character prefix)
# =========================

CONDITION_CONTRAINDICATIONS: Dict[str, Tuple[ContraindicationRule, ...]] = {
    # Chronic kidney disease
    "N18": (
        ContraindicationRule(("metformin",), INDICATOR_WARNING,
                             "Metformin contraindicated in severe renal impairment (eGFR <30)"),
        ContraindicationRule(("nsaid", "ibuprofen", "naproxen", "ketorolac"), INDICATOR_WARNING,
                             "NSAIDs can worsen kidney function"),
        ContraindicationRule(("gadolinium",), INDICATOR_CRITICAL,
                             "Risk of nephrogenic systemic fibrosis"),
    ),
    # Heart failure
    "I50": (
        ContraindicationRule(("nsaid", "ibuprofen", "naproxen", "meloxicam"), INDICATOR_WARNING,
                             "NSAIDs can worsen heart failure and cause fluid retention"),
        ContraindicationRule(("verapamil", "diltiazem"), INDICATOR_WARNING,
                             "Non-dihydropyridine CCBs may worsen heart failure"),
        ContraindicationRule(("thiazolidinedione", "pioglitazone", "rosiglitazone"), INDICATOR_CRITICAL,
                             "TZDs contraindicated in heart failure due to fluid retention"),
    ),
    # Asthma
    "J45": (
        ContraindicationRule(("propranolol", "atenolol", "nadolol", "timolol"), INDICATOR_CRITICAL,
                             "Non-selective beta-blockers can trigger bronchospasm in asthma"),
        ContraindicationRule(("aspirin",), INDICATOR_WARNING,
                             "Some asthma patients have aspirin-exacerbated respiratory disease"),
    ),
    # COPD
    "J44": (
        ContraindicationRule(("propranolol", "nadolol", "timolol"), INDICATOR_WARNING,
                             "Non-selective beta-blockers may worsen bronchospasm"),
    ),
    # Liver disease
    "K74": (
        ContraindicationRule(("acetaminophen", "tylenol"), INDICATOR_WARNING,
                             "Limit acetaminophen to 2g/day in liver disease"),
        ContraindicationRule(("methotrexate",), INDICATOR_CRITICAL,
                             "Methotrexate hepatotoxic and contraindicated in significant liver disease"),
        ContraindicationRule(("statin", "atorvastatin", "simvastatin"), INDICATOR_WARNING,
                             "Statins may require dose adjustment in liver disease"),
    ),
    # GI bleeding history
    "K92": (
        ContraindicationRule(("aspirin", "nsaid", "ibuprofen", "naproxen"), INDICATOR_WARNING,
                             "NSAIDs/aspirin increase GI bleeding risk"),
        ContraindicationRule(("warfarin", "apixaban", "rivaroxaban"), INDICATOR_WARNING,
                             "Anticoagulants increase GI bleeding risk"),
    ),
    # Myasthenia gravis
    "G70": (
        ContraindicationRule(("aminoglycoside", "gentamicin", "tobramycin"), INDICATOR_CRITICAL,
                             "Aminoglycosides can worsen myasthenia gravis"),
        ContraindicationRule(("fluoroquinolone", "ciprofloxacin", "levofloxacin"), INDICATOR_CRITICAL,
                             "Fluoroquinolones can worsen myasthenia gravis"),
        ContraindicationRule(("magnesium",), INDICATOR_WARNING,
                             "IV magnesium can worsen myasthenia"),
    ),
    # Seizure disorder
    "G40": (
        ContraindicationRule(("bupropion", "wellbutrin"), INDICATOR_WARNING,
                             "Bupropion lowers seizure threshold"),
        ContraindicationRule(("tramadol",), INDICATOR_WARNING,
                             "Tramadol lowers seizure threshold"),
    ),
    # Long QT history
    "I45": (
        ContraindicationRule(("azithromycin", "zithromax"), INDICATOR_WARNING,
                             "Azithromycin can prolong QT interval"),
        ContraindicationRule(("ondansetron", "zofran"), INDICATOR_WARNING,
                             "Ondansetron can prolong QT interval"),
        ContraindicationRule(("haloperidol",), INDICATOR_WARNING,
                             "Haloperidol can prolong QT interval"),
    ),
}


# =========================
# Renal dosing
# =========================

RENALLY_CLEARED_MEDICATIONS: Tuple[str, ...] = (
    "metformin",
    "gabapentin",
    "pregabalin",
    "vancomycin",
    "gentamicin",
    "enoxaparin",
    "dabigatran",
    "allopurinol",
    "baclofen",
    "acyclovir",
    "valacyclovir",
)

EGFR_IMPAIRMENT_THRESHOLD = 60.0       # mL/min/1.73m2, impaired below
CREATININE_IMPAIRMENT_THRESHOLD = 1.5  # mg/dL, impaired above


# =========================
# Lab prerequisites (order-review)
# =========================

_POTASSIUM_ACE = LabPrerequisite("potassium", "Check potassium level before starting ACE inhibitor")
_RENAL_ACE = LabPrerequisite("creatinine", "Check renal function before starting ACE inhibitor")

LAB_PREREQUISITES: Dict[str, Tuple[LabPrerequisite, ...]] = {
    "metformin": (
        LabPrerequisite("creatinine", "Check renal function (eGFR) before starting metformin"),
    ),
    "lisinopril": (_POTASSIUM_ACE, _RENAL_ACE),
    "enalapril": (_POTASSIUM_ACE, _RENAL_ACE),
    "spironolactone": (
        LabPrerequisite("potassium", "Check potassium level before starting potassium-sparing diuretic"),
    ),
    "warfarin": (
        LabPrerequisite("inr", "Check baseline INR before starting warfarin"),
        LabPrerequisite("pt", "Check PT/INR before starting warfarin"),
    ),
    "digoxin": (
        LabPrerequisite("potassium", "Check potassium level before starting digoxin"),
        LabPrerequisite("creatinine", "Check renal function before starting digoxin"),
    ),
    "vancomycin": (
        LabPrerequisite("creatinine", "Check renal function for vancomycin dosing"),
    ),
    "gentamicin": (
        LabPrerequisite("creatinine", "Check renal function for aminoglycoside dosing"),
    ),
    "lithium": (
        LabPrerequisite("creatinine", "Check renal function before starting lithium"),
        LabPrerequisite("thyroid", "Check thyroid function before starting lithium"),
    ),
}


# =========================
# Care plan recommendations (patient-view)
# =========================

CODE_SYSTEM_ICD10 = "icd-10"
CODE_SYSTEM_SNOMED = "snomed"

CONDITION_RULES: Tuple[ConditionRule, ...] = (
    ConditionRule(
        id="diabetes-care-plan",
        code_system=CODE_SYSTEM_ICD10,
        code_prefix="E1",
        title="Diabetes Care Plan Review Recommended",
        description="Patient has {condition}. Review care plan for A1C monitoring, foot exams, and eye exams.",
        indicator=INDICATOR_INFO,
        rationale="ADA guidelines recommend quarterly A1C for uncontrolled diabetes and annual foot/eye exams.",
        source=GUIDELINE_SOURCES["ADA"],
        actions=(
            RecommendedAction("Order A1C if not done in last 3 months", "order"),
            RecommendedAction("Schedule annual diabetic eye exam", "referral"),
            RecommendedAction("Perform diabetic foot exam", "monitoring"),
        ),
    ),
    ConditionRule(
        id="hypertension-management",
        code_system=CODE_SYSTEM_ICD10,
        code_prefix="I1",
        title="Hypertension Management Review",
        description="Patient has {condition}. Review blood pressure control and medication adherence.",
        indicator=INDICATOR_INFO,
        rationale="JNC guidelines recommend regular BP monitoring and lifestyle modifications.",
        source=GUIDELINE_SOURCES["JNC"],
        actions=(
            RecommendedAction("Review home BP logs", "monitoring"),
            RecommendedAction("Assess medication adherence", "education"),
        ),
    ),
    ConditionRule(
        id="heart-failure-care",
        code_system=CODE_SYSTEM_ICD10,
        code_prefix="I50",
        title="Heart Failure Care Plan Attention Needed",
        description="Patient has {condition}. Ensure guideline-directed medical therapy is optimized.",
        indicator=INDICATOR_WARNING,
        rationale="ACC/AHA guidelines recommend GDMT optimization including ACEi/ARB/ARNI, beta-blocker, and MRA.",
        source=GUIDELINE_SOURCES["ACC_AHA_HF"],
        actions=(
            RecommendedAction("Review current GDMT medications", "monitoring"),
            RecommendedAction("Check recent BNP/proBNP levels", "order"),
            RecommendedAction("Assess fluid status and weight", "monitoring"),
        ),
    ),
    ConditionRule(
        id="copd-care",
        code_system=CODE_SYSTEM_ICD10,
        code_prefix="J44",
        title="COPD Care Plan Review",
        description="Patient has {condition}. Review inhaler technique and exacerbation history.",
        indicator=INDICATOR_INFO,
        rationale="GOLD guidelines recommend annual spirometry and inhaler technique assessment.",
        source=GUIDELINE_SOURCES["GOLD"],
        actions=(
            RecommendedAction("Assess inhaler technique", "education"),
            RecommendedAction("Review vaccination status", "monitoring"),
            RecommendedAction("Evaluate for pulmonary rehabilitation referral", "referral"),
        ),
    ),
    ConditionRule(
        id="ckd-monitoring",
        code_system=CODE_SYSTEM_ICD10,
        code_prefix="N18",
        title="CKD Monitoring Needed",
        description="Patient has {condition}. Monitor kidney function and manage cardiovascular risk.",
        indicator=INDICATOR_WARNING,
        rationale="KDIGO guidelines recommend regular monitoring of eGFR and UACR.",
        source=GUIDELINE_SOURCES["KDIGO"],
        actions=(
            RecommendedAction("Check recent eGFR and UACR", "order"),
            RecommendedAction("Review nephrotoxic medications", "monitoring"),
            RecommendedAction("Consider nephrology referral if eGFR declining", "referral"),
        ),
    ),
    ConditionRule(
        id="asthma-control-icd10",
        code_system=CODE_SYSTEM_ICD10,
        code_prefix="J45",
        title="Asthma Control Assessment",
        description="Patient has {condition}. Assess asthma control and review action plan.",
        indicator=INDICATOR_INFO,
        rationale="GINA guidelines recommend regular assessment of asthma control.",
        source=GUIDELINE_SOURCES["GINA"],
        actions=(
            RecommendedAction("Review asthma action plan", "education"),
            RecommendedAction("Check rescue inhaler use frequency", "monitoring"),
        ),
    ),
    ConditionRule(
        id="asthma-control",
        code_system=CODE_SYSTEM_SNOMED,
        code_prefix="195967001",
        title="Asthma Control Assessment",
        description="Patient has {condition}. Assess asthma control and review action plan.",
        indicator=INDICATOR_INFO,
        rationale="GINA guidelines recommend regular assessment of asthma control.",
        source=GUIDELINE_SOURCES["GINA"],
        actions=(
            RecommendedAction("Review asthma action plan", "education"),
            RecommendedAction("Check rescue inhaler use frequency", "monitoring"),
        ),
    ),
)

SCREENING_RULES: Tuple[ScreeningRule, ...] = (
    ScreeningRule(
        id="colorectal-screening",
        title="Colorectal Cancer Screening",
        description=(
            "Patient is in the recommended age range for colorectal cancer screening. "
            "Review screening status."
        ),
        min_age=45,
        max_age=75,
        indicator=INDICATOR_INFO,
        rationale="USPSTF recommends colorectal cancer screening for adults aged 45-75.",
        source=GUIDELINE_SOURCES["USPSTF"],
    ),
)

MISSING_VITALS_TITLE = "Missing Recent Vital Signs"
MISSING_VITALS_DESCRIPTION = (
    "No recent vital signs on record. Consider capturing vital signs for this patient."
)
