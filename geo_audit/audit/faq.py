"""FAQ page synthesis from question-shaped headings."""
from __future__ import annotations

import json
import re
from dataclasses import dataclass
from html import escape
from urllib.parse import urlparse

from geo_audit.audit.models import AuditContext, FaqArtifact
from geo_audit.audit.suggestions import display_date, run_date

QUESTION_HEADING = re.compile(r"\b(what|why|how|when|where|faq|question)\b", re.IGNORECASE)
MAX_QUESTIONS = 8
MIN_QUESTIONS = 3
MAX_ANSWER_WORDS = 120
PLACEHOLDER_ANSWER = "Provide a concise answer sourced from on-page copy."
DEFAULT_SLUG = "geo-audit"


@dataclass(frozen=True)
class QAPair:
    question: str
    answer: str


def normalize_question(text: str) -> str:
    question = " ".join(text.split())
    if not question or question.endswith("?"):
        return question
    return f"{question}?"


def truncate_words(text: str, max_words: int = MAX_ANSWER_WORDS) -> str:
    words = text.split()
    if len(words) <= max_words:
        return text
    return " ".join(words[:max_words]) + "…"


def _paragraph_at(paragraphs: tuple[str, ...], idx: int) -> str:
    return paragraphs[idx] if idx < len(paragraphs) else ""


def build_qa_pairs(ctx: AuditContext) -> list[QAPair]:
    """Pair question headings with the paragraph at the same position.

    The JS paragraph is preferred, then the no-JS one, then a placeholder.
    """
    js = ctx.artifacts.js.snapshot
    base = ctx.artifacts.base.snapshot
    candidates = [h for h in js.headings if QUESTION_HEADING.search(h)][:MAX_QUESTIONS]
    return [
        QAPair(
            question=normalize_question(heading),
            answer=truncate_words(
                _paragraph_at(js.paragraphs, idx)
                or _paragraph_at(base.paragraphs, idx)
                or PLACEHOLDER_ANSWER
            ),
        )
        for idx, heading in enumerate(candidates)
    ]


def recommended_faq_path(url: str) -> str:
    segments = [segment for segment in urlparse(url).path.split("/") if segment]
    slug = segments[-1] if segments else DEFAULT_SLUG
    return f"/{slug}/faq"


def _render_html(pairs: list[QAPair], provenance: str) -> str:
    sections = "\n".join(
        '<section class="border-b border-border py-4">\n'
        f'    <h2 class="text-xl font-semibold">{escape(pair.question)}</h2>\n'
        f"    <p>{escape(pair.answer)}</p>\n"
        "  </section>"
        for pair in pairs
    )
    return (
        '<article class="prose prose-slate max-w-none">\n'
        f'  <p class="text-sm text-muted-foreground">{escape(provenance)}</p>\n'
        f"  {sections}\n"
        "</article>"
    )


def _render_jsonld(pairs: list[QAPair], url: str, iso_date: str) -> str:
    return json.dumps(
        {
            "@context": "https://schema.org",
            "@type": "FAQPage",
            "dateModified": iso_date,
            "mainEntity": [
                {
                    "@type": "Question",
                    "name": pair.question,
                    "acceptedAnswer": {"@type": "Answer", "text": pair.answer},
                }
                for pair in pairs
            ],
            "mainEntityOfPage": url,
            "publisher": {"@type": "Organization", "name": urlparse(url).hostname},
        },
        indent=2,
        ensure_ascii=False,
    )


def maybe_generate_faq_artifact(ctx: AuditContext) -> FaqArtifact | None:
    """Build an FAQ artifact, or None when fewer than three question headings exist."""
    pairs = build_qa_pairs(ctx)
    if len(pairs) < MIN_QUESTIONS:
        return None

    moment = run_date(ctx)
    provenance = f"Generated from {ctx.url} on {display_date(moment)}."
    return FaqArtifact(
        recommended_path=recommended_faq_path(ctx.url),
        html=_render_html(pairs, provenance),
        jsonld=_render_jsonld(pairs, ctx.url, moment.date().isoformat()),
        provenance=provenance,
    )
