"""Static California DCC labeling checklist and the prompt built from it."""

# (id, display name, what the model should look for)
CHECKS = [
    ("universal_symbol", "Universal Cannabis Symbol",
     "CA universal cannabis symbol (exclamation in diamond) present"),
    ("thc_content", "THC Content Disclosure",
     "THC content/percentage clearly displayed"),
    ("cbd_content", "CBD Content Disclosure",
     'CBD content shown (or "na" if non-CBD product)'),
    ("net_weight", "Net Weight / Volume",
     "Net weight / net volume displayed"),
    ("serving_size", "Serving Size & Count",
     "Serving size and servings per package (for edibles/multi-serve)"),
    ("health_warning", "CA Health & Safety Warning",
     "Required CA health and safety warning statement"),
    ("pregnancy_warning", "Pregnancy / Children Warning",
     "Pregnancy warning (KEEP OUT OF REACH OF CHILDREN / pregnancy symbol)"),
    ("age_restriction", "21+ Age Restriction",
     "21+ age restriction language or symbol"),
    ("license_number", "License Number",
     "Retailer/distributor license number present"),
    ("batch_lot", "Batch / Lot Number",
     "Batch or lot number present"),
    ("manufacturer_info", "Manufacturer / Distributor Info",
     "Manufacturer/distributor name and city/state"),
    ("no_health_claims", "No Prohibited Health Claims",
     "No prohibited health claims, medical claims, or disease treatment claims"),
    ("no_minor_appeal", "No Minor-Appeal Elements",
     "No cartoon characters, bright candy-like imagery, or elements appealing to minors"),
    ("no_alcohol_refs", "No Alcohol / Tobacco References",
     "No alcohol or tobacco brand references"),
    ("font_readability", "Font Legibility (>=6pt)",
     "Text is legible (min 6pt font for required disclosures)"),
    ("child_resistant_note", "Child-Resistant Notation",
     "Child-resistant packaging notation (if applicable)"),
    ("correct_category", "Product Category Identified",
     "Product type/category correctly identified on label"),
]

CHECK_NAMES = {check_id: name for check_id, name, _ in CHECKS}

CA_REGULATIONS = [
    "17 CCR § 5303", "17 CCR § 5304", "17 CCR § 5305", "17 CCR § 5306",
    "Health & Safety Code § 26120", "DCC Label Requirements",
    "Universal Symbol Mandate", "Minor Appeal Prohibition",
    "Health Claim Restriction", "THC/CBD Disclosure",
]

VERDICTS = ("compliant", "non-compliant", "conditional")
CHECK_STATUSES = ("pass", "fail", "warning", "na")

RESULT_SCHEMA = """{
  "verdict": "compliant" | "non-compliant" | "conditional",
  "score": <integer 0-100>,
  "summary": "<2-3 sentence executive summary of findings>",
  "checks": [
    {
      "id": "check_id",
      "name": "<requirement name>",
      "status": "pass" | "fail" | "warning" | "na",
      "detail": "<specific finding for this artwork>"
    }
  ],
  "recommendations": ["<specific actionable correction>", ...]
}"""

USER_INSTRUCTION = (
    "Please analyze this cannabis product label/packaging artwork for California "
    "DCC compliance. Examine every visible element carefully and report your "
    "findings in the required JSON format."
)


def build_system_prompt(checks=CHECKS):
    numbered = "\n".join(
        f"{i}. {check_id} — {description}"
        for i, (check_id, _, description) in enumerate(checks, start=1)
    )
    return f"""You are an expert California cannabis packaging compliance auditor with deep knowledge of:
- California Code of Regulations Title 17 §§ 5303-5306 (DCC labeling requirements)
- Business & Professions Code § 26120 (cannabis labeling)
- Health & Safety Code cannabis packaging provisions
- DCC packaging and labeling requirements

Your job is to analyze cannabis product label/packaging artwork images and determine compliance with California regulations.

You must respond ONLY with a valid JSON object (no markdown, no extra text) in this exact structure:
{RESULT_SCHEMA}

Evaluate ALL of these checks (use "na" if truly not determinable from image):
{numbered}

Be specific and accurate. If you cannot see a required element, mark it as "fail" not "na". Only use "na" for checks that genuinely don't apply to this product type."""


SYSTEM_PROMPT = build_system_prompt()
