"""Telegram message formatting utilities."""

import telegramify_markdown

MAX_MESSAGE_LENGTH = 4000


def split_chunks(text: str, limit: int = MAX_MESSAGE_LENGTH) -> list[str]:
    """Split text into chunks under limit, preferring blank-line boundaries."""
    chunks = []
    current = ""
    for block in text.split("\n\n"):
        candidate = f"{current}\n\n{block}" if current else block
        if len(candidate) <= limit:
            current = candidate
            continue
        if current:
            chunks.append(current)
        while len(block) > limit:
            cut = limit
            # Keep MarkdownV2 escapes together with the character they escape
            if block[cut - 1] == "\\":
                cut -= 1
            chunks.append(block[:cut])
            block = block[cut:]
        current = block
    if current:
        chunks.append(current)
    return chunks


async def reply_markdown(message, text: str):
    """Reply with markdown text converted to MarkdownV2, chunked after conversion."""
    converted = telegramify_markdown.markdownify(text)
    for chunk in split_chunks(converted):
        await message.reply_text(chunk, parse_mode="MarkdownV2")
