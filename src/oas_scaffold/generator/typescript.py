"""Just enough TypeScript scanning to edit generated classes in place.

Source is first masked: comments, string literals and regex literals are
blanked out with spaces (newlines kept), so every offset in the masked
text matches the original and brace counting never trips over a "}" inside a string.
"""

import re
from dataclasses import dataclass, field

_IDENTIFIER = re.compile(r"([A-Za-z_$][\w$]*)\s*[?!]?\s*$")
_TRAILING_GENERIC = re.compile(r"<[^<>]*>\s*$")
_IMPORT_CLAUSE = re.compile(r"^\s*import\s+(?:type\s+)?\{([^}]*)\}", re.MULTILINE)
_IMPORT_STATEMENT = re.compile(r"^\s*import\b[^;]*;?[ \t]*$", re.MULTILINE)

PAIRS = {"(": ")", "[": "]", "{": "}"}

# A property without a semicolon continues onto the next line after these
_CONTINUATION_CHARS = set("=,:|&(+-*/?.<")

# A "/" after one of these opens a regex literal
_REGEX_PRECEDERS = set("(,=:[!&|?{};+-*%<>~^\n")
_REGEX_KEYWORDS = {
    "return", "typeof", "case", "do", "else", "in", "of", "new",
    "delete", "void", "throw", "instanceof", "yield", "await",
}
_TRAILING_WORD = re.compile(r"([A-Za-z_$][\w$]*)\s*$")


@dataclass
class ScanResult:
    masked: str
    problems: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Member:
    """A class member; ``start`` includes the whitespace and comments before it."""

    name: str
    kind: str  # method / property
    start: int
    end: int


@dataclass(frozen=True)
class ClassBody:
    name: str
    open: int
    close: int
    members: list[Member]

    def methods(self) -> list[Member]:
        return [m for m in self.members if m.kind == "method"]


def _blank(text: str) -> str:
    return "".join(c if c == "\n" else " " for c in text)


def scan(source: str) -> ScanResult:
    """Mask comments, string literals and regex literals, reporting unterminated ones.

    A masked regex literal reads as ``"  "`` so it still looks like a value.
    """
    out: list[str] = []
    problems: list[str] = []
    last = ""  # last significant masked character, "\n" at the start of a line
    i = 0
    n = len(source)
    while i < n:
        c = source[i]
        if c == "/" and source.startswith("//", i):
            end = source.find("\n", i)
            end = n if end == -1 else end
        elif c == "/" and source.startswith("/*", i):
            end = source.find("*/", i + 2)
            if end == -1:
                problems.append(f"line {_line(source, i)}: unterminated block comment")
                end = n
            else:
                end += 2
        elif c == "/" and _regex_allowed(source, i, last) and _regex_end(source, i) != -1:
            end = _regex_end(source, i)
            close = source.rindex("/", i + 1, end)
            out.append('"' + _blank(source[i + 1:close]) + '"' + _blank(source[close + 1:end]))
            last = '"'
            i = end
            continue
        elif c in "'\"`":
            end = i + 1
            while end < n and source[end] != c:
                if source[end] == "\\":
                    end += 1
                elif source[end] == "\n" and c != "`":
                    break
                end += 1
            if end >= n or source[end] != c:
                problems.append(f"line {_line(source, i)}: unterminated string")
            end = min(end + 1, n)
            last = c
        else:
            out.append(c)
            if c == "\n" or not c.isspace():
                last = c
            i += 1
            continue
        blanked = _blank(source[i:end])
        if c in "'\"`":
            # Keep the delimiters so a masked literal still reads as a value
            blanked = c + blanked[1:]
            if end - i > 1 and source[end - 1] == c:
                blanked = blanked[:-1] + c
        out.append(blanked)
        i = end
    return ScanResult("".join(out), problems)


def _regex_allowed(source: str, index: int, last: str) -> bool:
    """Whether a ``/`` at ``index`` opens a regex literal rather than dividing."""
    if not last or last in _REGEX_PRECEDERS:
        return True
    if last.isalnum() or last in "_$":
        match = _TRAILING_WORD.search(source, max(0, index - 32), index)
        return bool(match) and match.group(1) in _REGEX_KEYWORDS
    return False


def _regex_end(source: str, index: int) -> int:
    """Offset just past the regex literal (flags included) opening at ``index``, or -1."""
    n = len(source)
    j = index + 1
    in_class = False
    while j < n:
        c = source[j]
        if c == "\\":
            j += 2
            continue
        if c == "\n":
            return -1
        if in_class:
            in_class = c != "]"
        elif c == "[":
            in_class = True
        elif c == "/":
            j += 1
            while j < n and (source[j].isalnum() or source[j] in "_$"):
                j += 1
            return j
        j += 1
    return -1


def _line(source: str, index: int) -> int:
    return source.count("\n", 0, index) + 1


def check_balanced(source: str) -> list[str]:
    """Return a description of every unbalanced bracket or unterminated literal."""
    result = scan(source)
    problems = list(result.problems)
    stack: list[tuple[str, int]] = []
    for i, c in enumerate(result.masked):
        if c in PAIRS:
            stack.append((c, i))
        elif c in PAIRS.values():
            if not stack or PAIRS[stack[-1][0]] != c:
                problems.append(f"line {_line(source, i)}: unexpected '{c}'")
                continue
            stack.pop()
    for opener, i in stack:
        problems.append(f"line {_line(source, i)}: '{opener}' is never closed")
    return problems


def match_closing(masked: str, open_index: int) -> int:
    """Index of the bracket closing the one at ``open_index``, or -1."""
    opener = masked[open_index]
    closer = PAIRS[opener]
    depth = 0
    for i in range(open_index, len(masked)):
        if masked[i] == opener:
            depth += 1
        elif masked[i] == closer:
            depth -= 1
            if depth == 0:
                return i
    return -1


def _skip_ws(masked: str, i: int, limit: int) -> int:
    while i < limit and masked[i].isspace():
        i += 1
    return i


def _skip_decorators(masked: str, i: int, limit: int) -> int:
    while i < limit and masked[i] == "@":
        i += 1
        while i < limit and (masked[i].isalnum() or masked[i] in "_$."):
            i += 1
        i = _skip_ws(masked, i, limit)
        if i < limit and masked[i] == "(":
            close = match_closing(masked, i)
            if close == -1:
                return limit
            i = close + 1
            i = _skip_ws(masked, i, limit)
    return i


def _name_of(header: str) -> str:
    header = _TRAILING_GENERIC.sub("", header)
    match = _IDENTIFIER.search(header)
    return match.group(1) if match else ""


def _scan_member(masked: str, start: int, limit: int) -> tuple[str, str, int]:
    """Return ``(name, kind, end)`` for the member whose header starts at ``start``."""
    j = start
    while j < limit:
        c = masked[j]
        if c == "(":
            header = masked[start:j]
            close = match_closing(masked, j)
            if close == -1:
                return _name_of(header), "property", limit
            if "=" in header:
                j = close + 1
                continue
            # Method: parameters, optional return type, then a body or ";"
            k = close + 1
            while k < limit and masked[k] not in "{;":
                if masked[k] in "([":
                    inner = match_closing(masked, k)
                    k = limit if inner == -1 else inner + 1
                else:
                    k += 1
            if k < limit and masked[k] == "{":
                k = match_closing(masked, k)
            return _name_of(header), "method", min(k + 1, limit)
        if c in "{[":
            close = match_closing(masked, j)
            j = limit if close == -1 else close + 1
            continue
        if c == ";":
            return _name_of(_property_header(masked[start:j])), "property", j + 1
        if c == "\n":
            text = masked[start:j].rstrip()
            if text and text[-1] not in _CONTINUATION_CHARS:
                return _name_of(_property_header(text)), "property", j
        if c == "}":
            return _name_of(_property_header(masked[start:j])), "property", j
        j += 1
    return _name_of(_property_header(masked[start:limit])), "property", limit


def _property_header(text: str) -> str:
    return re.split(r"[:=;\n]", text, maxsplit=1)[0]


def find_class(source: str, name: str) -> ClassBody | None:
    """Locate ``class <name>`` and list its members."""
    masked = scan(source).masked
    match = re.search(rf"\bclass\s+{re.escape(name)}\b", masked)
    if not match:
        return None
    open_index = masked.find("{", match.end())
    if open_index == -1:
        return None
    close_index = match_closing(masked, open_index)
    if close_index == -1:
        return None

    members = []
    i = open_index + 1
    while True:
        lead = i
        i = _skip_ws(masked, i, close_index)
        if i >= close_index:
            break
        if masked[i] == ";":
            i += 1
            continue
        header_start = _skip_decorators(masked, i, close_index)
        member_name, kind, end = _scan_member(masked, header_start, close_index)
        members.append(Member(member_name, kind, lead, end))
        i = max(end, header_start + 1)
    return ClassBody(name, open_index, close_index, members)


def imported_names(source: str) -> set[str]:
    """Names bound by ``import { A, type B as C } from ...`` statements."""
    names = set()
    for clause in _IMPORT_CLAUSE.findall(scan(source).masked):
        for item in clause.split(","):
            item = re.sub(r"^\s*type\s+", "", item).strip()
            if item:
                names.add(item.split(" as ")[-1].strip())
    return names


def import_insertion_point(source: str) -> int:
    """Offset just after the last top-level import statement, or 0."""
    masked = scan(source).masked
    end = 0
    for match in _IMPORT_STATEMENT.finditer(masked):
        # Dynamic imports inside a body are not statements we can append to
        prefix = masked[: match.start()]
        if prefix.count("{") == prefix.count("}"):
            end = match.end()
    return end


def apply_edits(source: str, edits: list[tuple[int, int, str]]) -> str:
    """Apply ``(start, end, replacement)`` edits given against the original text."""
    for start, end, replacement in sorted(edits, key=lambda e: (e[0], e[1]), reverse=True):
        source = source[:start] + replacement + source[end:]
    return source
