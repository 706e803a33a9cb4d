import logging

from courtside.prompts.classify import CLASSIFY_PROMPT

logger = logging.getLogger(__name__)


async def is_informational_question(llm, question: str) -> bool:
    """True only when the model clearly labels the question informational.

    Any failure or unexpected answer counts as a data question so legitimate
    queries are never blocked.
    """
    prompt = CLASSIFY_PROMPT.format(question=question)
    try:
        result = await llm.chat_completion(
            messages=[{"role": "user", "content": prompt}],
            temperature=0.0,
            max_tokens=5,
        )
    except Exception:
        logger.warning("Question classification failed; treating as data question", exc_info=True)
        return False
    label = result.strip().strip(".").lower()
    return label == "informational"
