"""Prompt construction for the answering model."""

# Parsed back out of the answer by src.generation.citations. Changing the
# wording here requires changing the parser's pattern too.
USED_SECTIONS_MARKER = "KULLANILAN BÖLÜMLER:"

PROMPT_TEMPLATE = """You are an expert document assistant. You answer the user's question using the document content provided below.

YOUR TASK:
- Read the numbered document sections below
- Identify the sections that can answer the user's question
- Answer using only the information in those sections
- At the end of your answer, state which sections you used

DOCUMENT SECTIONS:
{context}

QUESTION: {question}

YOUR ANSWER:
[Your answer here]

{marker} [Only the numbers of the sections you used, e.g.: 1,3]"""


def build_prompt(question: str, context_text: str) -> str:
    """Fill the answering template with the numbered context and question."""
    return PROMPT_TEMPLATE.format(
        context=context_text,
        question=question,
        marker=USED_SECTIONS_MARKER,
    )
