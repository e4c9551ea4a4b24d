import os
import json
import logging
from typing import Any, Dict, List, Optional

import openai
from dotenv import load_dotenv

from ..logic.constants import (
    Tier,
    Region,
    SizeCategory,
    TestingPolicy,
    CandidateOrigin,
    MIN_PROBABILITY,
    MAX_PROBABILITY,
)
from ..logic.contracts import Candidate
from .prompt_builder import build_system_prompt

# Load env vars (if not already loaded)
load_dotenv()

logger = logging.getLogger(__name__)


def parse_testing_policy(raw: Any) -> Optional[str]:
    """Map free text like "Test Optional" or "test-blind" to a policy value."""
    if not isinstance(raw, str):
        return None
    text = raw.lower()
    if "blind" in text:
        return TestingPolicy.BLIND.value
    if "required" in text:
        return TestingPolicy.REQUIRED.value
    if "optional" in text or "flexible" in text:
        return TestingPolicy.OPTIONAL.value
    return None


def _parse_enum(enum_cls, raw: Any) -> Optional[str]:
    if not isinstance(raw, str):
        return None
    for member in enum_cls:
        if member.value.lower() == raw.strip().lower():
            return member.value
    return None


def _parse_int(raw: Any) -> Optional[int]:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return int(raw)
    if isinstance(raw, str):
        digits = raw.replace(",", "").replace("%", "").strip()
        try:
            return int(float(digits))
        except ValueError:
            return None
    return None


def parse_school(entry: Any) -> Optional[Candidate]:
    """
    Convert one "schools" entry into a Candidate.
    Returns None when the entry has no usable name.
    """
    if not isinstance(entry, dict):
        return None
    name = entry.get("name")
    if not isinstance(name, str) or not name.strip():
        return None

    enrollment = _parse_int(entry.get("enrollment"))
    probability = _parse_int(entry.get("acceptanceProbability"))
    if probability is not None:
        probability = max(MIN_PROBABILITY, min(MAX_PROBABILITY, probability))

    url = entry.get("url")
    reasoning = entry.get("matchReasoning")

    return Candidate(
        identity=name.strip(),
        reference_url=url if isinstance(url, str) else "",
        tier=_parse_enum(Tier, entry.get("type")) or Tier.MATCH.value,
        region=_parse_enum(Region, entry.get("region")),
        size_category=_parse_enum(SizeCategory, entry.get("campusSize")),
        enrollment=max(0, enrollment or 0),
        testing_policy=parse_testing_policy(entry.get("testPolicy")),
        admission_probability=probability,
        rationale=reasoning if isinstance(reasoning, str) else "",
        origin=CandidateOrigin.GENERATED.value,
    )


def parse_schools_payload(content: str) -> List[Candidate]:
    """Parse the JSON object returned by the model, skipping malformed entries."""
    payload: Dict[str, Any] = json.loads(content)
    schools = payload.get("schools") if isinstance(payload, dict) else None
    if not isinstance(schools, list):
        return []

    candidates = []
    for entry in schools:
        candidate = parse_school(entry)
        if candidate is None:
            logger.debug(f"[Generator] Skipped malformed entry: {entry!r}")
            continue
        candidates.append(candidate)
    return candidates


class OpenAICandidateSource:
    def __init__(self, client: Optional[openai.OpenAI] = None, model: Optional[str] = None):
        self.client = client
        if self.client is None:
            api_key = os.getenv("OPENAI_API_KEY")
            if api_key:
                self.client = openai.OpenAI(api_key=api_key)

        self.model = model or os.getenv("OPENAI_MODEL", "gpt-4o-mini")
        self.max_tokens = 4000
        self.temperature = 0.3

    def request_candidates(self, instructions: str, student_summary: str, count: int) -> List[Candidate]:
        """
        Ask the model for up to `count` candidate schools.
        Returns an empty list if the API key is missing or any error occurs.
        """
        if not self.client:
            logger.warning("[Generator] OpenAI API key not found. Skipping candidate generation.")
            return []
        if count <= 0:
            return []

        user_prompt = f"{instructions}\n\n{student_summary}"

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": build_system_prompt()},
                    {"role": "user", "content": user_prompt}
                ],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                response_format={"type": "json_object"}
            )

            content = response.choices[0].message.content
            if not content:
                return []

            candidates = parse_schools_payload(content)

        except (openai.OpenAIError, json.JSONDecodeError) as e:
            logger.warning(f"[Generator] Candidate generation failed: {e}")
            return []

        logger.info(f"[Generator] Received {len(candidates)} candidates (asked for {count})")
        return candidates[:count]
