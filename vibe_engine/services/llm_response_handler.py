"""
LLM Response Handler - turn free-form model replies into file sets.

Replies are run through an extraction ladder: an ordered list of
strategies, each returning an ExtractionResult. The first successful
result wins; the last strategy always succeeds with template scaffolding.
"""

import json
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from vibe_engine.logging_config import logger
from vibe_engine.services.generation_types import GeneratedFile
from vibe_engine.services.template_generator import build_file_set, render_default_component


FILES_OBJECT_PATTERN = re.compile(r'\{[\s\S]*"files"[\s\S]*\}')
CODE_BLOCK_PATTERN = re.compile(r"```[^\n`]*\n([\s\S]+?)\n```")
PRIMARY_FILE_MARKER = "page.tsx"


@dataclass
class ExtractionResult:
    """Outcome of one extraction strategy"""
    ok: bool
    strategy: str
    files: List[GeneratedFile] = field(default_factory=list)
    primary_code: str = ""
    reason: Optional[str] = None

    @classmethod
    def failed(cls, strategy: str, reason: str) -> "ExtractionResult":
        return cls(ok=False, strategy=strategy, reason=reason)


Strategy = Callable[[str, str], ExtractionResult]


def _content_text(content: Any) -> str:
    """File content as text; models often emit package.json as an object"""
    if isinstance(content, str):
        return content
    if content is None:
        return ""
    return json.dumps(content, indent=2)


def _coerce_files(raw_files: Any) -> Optional[List[GeneratedFile]]:
    """Validate a decoded `files` array; None when it is unusable"""
    if not isinstance(raw_files, list) or not raw_files:
        return None

    files = []
    for entry in raw_files:
        if not isinstance(entry, dict):
            return None
        path = entry.get("path")
        if not isinstance(path, str) or not path:
            return None
        language = entry.get("language")
        files.append(GeneratedFile(
            path=path,
            content=_content_text(entry.get("content")),
            language=language if isinstance(language, str) and language else "text"
        ))
    return files


def _primary_code(files: List[GeneratedFile]) -> str:
    for f in files:
        if PRIMARY_FILE_MARKER in f.path:
            return f.content
    return files[0].content


def _files_result(strategy: str, parsed: Any) -> ExtractionResult:
    if not isinstance(parsed, dict):
        return ExtractionResult.failed(strategy, "decoded JSON is not an object")
    files = _coerce_files(parsed.get("files"))
    if files is None:
        return ExtractionResult.failed(strategy, "missing, empty or malformed files array")
    return ExtractionResult(ok=True, strategy=strategy, files=files, primary_code=_primary_code(files))


def extract_json_files(text: str, prompt: str) -> ExtractionResult:
    """Stage 1: the first `{ ... "files" ... }` span, parsed as JSON"""
    match = FILES_OBJECT_PATTERN.search(text)
    if not match:
        return ExtractionResult.failed("json", "no JSON object with a files key")
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        return ExtractionResult.failed("json", f"JSON parse error: {e.msg}")
    return _files_result("json", parsed)


def extract_embedded_json_files(text: str, prompt: str) -> ExtractionResult:
    """Decode each `{` position in turn; catches JSON followed by prose with braces"""
    decoder = json.JSONDecoder()
    for match in re.finditer(r"\{", text):
        try:
            parsed, _ = decoder.raw_decode(text, match.start())
        except json.JSONDecodeError:
            continue
        result = _files_result("embedded_json", parsed)
        if result.ok:
            return result
    return ExtractionResult.failed("embedded_json", "no decodable object with files")


def extract_code_blocks(text: str) -> List[str]:
    """Inner text of every fenced block, whatever its language tag"""
    return CODE_BLOCK_PATTERN.findall(text)


def extract_code_block_files(text: str, prompt: str) -> ExtractionResult:
    """Stage 2: first fenced block becomes the page, scaffold around it"""
    blocks = extract_code_blocks(text)
    if not blocks:
        return ExtractionResult.failed("code_blocks", "no fenced code blocks")
    return ExtractionResult(
        ok=True,
        strategy="code_blocks",
        files=build_file_set(prompt, blocks[0]),
        primary_code=blocks[0]
    )


def scaffold_default_files(text: str, prompt: str) -> ExtractionResult:
    """Stage 3: nothing usable in the reply, scaffold from the prompt alone"""
    return ExtractionResult(
        ok=True,
        strategy="scaffold",
        files=build_file_set(prompt, ""),
        primary_code=render_default_component(prompt)
    )


DEFAULT_STRATEGIES: Sequence[Strategy] = (
    extract_json_files,
    extract_embedded_json_files,
    extract_code_block_files,
    scaffold_default_files,
)


class LLMResponseHandler:
    """
    Handle LLM responses: normalize content to text, then extract files
    """

    # Non-text component types dropped from structured content
    EXCLUDED_PARTS = [
        'thought_signature',
        'thought',
        'thinking',
        'reasoning',
        'metadata',
    ]

    def __init__(self, strategies: Optional[Sequence[Strategy]] = None):
        self.strategies = list(DEFAULT_STRATEGIES if strategies is None else strategies)

    @staticmethod
    def filter_response(response: Union[str, List, Dict, None]) -> str:
        """
        Reduce message content to plain text.

        Some OpenAI-compatible providers return content as a list of
        typed parts instead of a string.

        Args:
            response: message content (string, list of parts, or dict)

        Returns:
            Text content
        """
        if response is None:
            return ""

        if isinstance(response, str):
            return response

        if isinstance(response, dict):
            if response.get("type") in LLMResponseHandler.EXCLUDED_PARTS:
                return ""
            text = response.get("text")
            return text if isinstance(text, str) else ""

        if isinstance(response, list):
            parts = [LLMResponseHandler.filter_response(item) for item in response]
            return "".join(part for part in parts if part)

        return str(response)

    def extract(self, text: str, prompt: str) -> ExtractionResult:
        """Run the ladder; the first successful strategy wins"""
        for strategy in self.strategies:
            result = strategy(text, prompt)
            if result.ok:
                logger.info(
                    "File set extracted",
                    strategy=result.strategy,
                    file_count=len(result.files)
                )
                return result
            logger.debug("Extraction strategy failed", strategy=result.strategy, reason=result.reason)

        # Custom ladders may omit the scaffold stage
        logger.warning("No extraction strategy succeeded, scaffolding from prompt")
        return scaffold_default_files(text, prompt)
