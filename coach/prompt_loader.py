from pathlib import Path
from string import Template

BASE_PATH = Path(__file__).parent
PROMPT_PATH = BASE_PATH / "prompts"

DOMAINS = ["tech", "finance", "law"]


def load_prompt_template(domain: str) -> str:
    file = PROMPT_PATH / f"{domain}.txt"
    if not file.exists():
        return ""
    return file.read_text(encoding="utf-8")


def build_scoring_prompt(domain: str, question: str, answer: str) -> str:
    """Fill the domain's evaluation template with the question and the candidate's answer."""
    if domain not in DOMAINS:
        raise ValueError(f"Unknown interview domain '{domain}'. Choose from: {', '.join(DOMAINS)}")
    template = Template(load_prompt_template(domain))
    return template.safe_substitute(question=question, answer=answer).strip()
