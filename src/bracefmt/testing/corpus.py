from __future__ import annotations

import random
import string


_KEYWORDS = {
    "fn",
    "mod",
    "use",
    "pub",
    "let",
    "if",
    "else",
    "while",
    "for",
    "loop",
    "return",
    "break",
    "continue",
    "impl",
    "trait",
    "match",
    "unsafe",
    "async",
    "struct",
    "enum",
    "union",
    "const",
    "static",
    "type",
    "where",
    "extern",
    "default",
    "in",
}

_TYPES = ["i32", "u64", "bool", "String", "Vec<u8>", "Option<usize>"]
_WORDS = ["todo", "fixme", "note", "keep", "this", "the", "value", "loop", "edge", "case", "why", "ok"]


def _ident(r: random.Random) -> str:
    head = r.choice(string.ascii_lowercase + "_")
    tail = "".join(r.choice(string.ascii_lowercase + string.digits + "_") for _ in range(r.randint(0, 8)))
    s = head + tail
    if s in _KEYWORDS or s == "_":
        return s + "x"
    return s


def _ws(r: random.Random) -> str:
    """Messy horizontal whitespace."""
    return r.choice(["", " ", "  ", "\t", " "])


def _sp(r: random.Random) -> str:
    """At least one horizontal whitespace character."""
    return r.choice([" ", "  ", "\t", " "])


def _comment_text(r: random.Random) -> str:
    return " ".join(r.choice(_WORDS) for _ in range(r.randint(1, 6)))


def _line_comment(r: random.Random) -> str:
    return "// " + _comment_text(r)


def _block_comment(r: random.Random) -> str:
    return "/* " + _comment_text(r) + " */"


def _blank_lines(r: random.Random) -> str:
    return "\n" * r.choice([1, 1, 1, 2, 3])


def generate_sources(*, seed: int, count: int) -> list[str]:
    r = random.Random(seed)
    return [_gen_one(r) for _ in range(count)]


def generate_corpus_files(*, seed: int, count: int) -> list[tuple[str, str]]:
    """Generate a deterministic corpus as a *file set*.

    Returns a list of (relative_path, source); names are `case_000000.bf`, ...
    """
    return [(f"case_{i:06d}.bf", src) for i, src in enumerate(generate_sources(seed=seed, count=count))]


def _gen_one(r: random.Random) -> str:
    parts: list[str] = []
    if r.random() < 0.2:
        parts.append(_line_comment(r) + _blank_lines(r))
    if r.random() < 0.15:
        parts.append("#![allow(dead_code)]" + _blank_lines(r))

    for _ in range(r.randint(0, 4)):
        parts.append(_gen_use(r) + "\n")
    if parts:
        parts.append(_blank_lines(r))

    for _ in range(r.randint(1, 4)):
        parts.append(_gen_item(r, depth=0))
        parts.append(_blank_lines(r))

    if r.random() < 0.15:
        parts.append(_line_comment(r) + "\n")
    return "".join(parts)


def _gen_use(r: random.Random) -> str:
    segs = [_ident(r) for _ in range(r.randint(1, 3))]
    sep = r.choice(["::", " :: ", "::"])
    path = sep.join(segs)
    if r.random() < 0.25:
        members = [_ident(r) for _ in range(r.randint(1, 3))]
        path += "::{" + _ws(r) + ("," + _ws(r)).join(members) + _ws(r) + "}"
    vis = "pub " if r.random() < 0.15 else ""
    return f"{vis}use{_sp(r)}{path}{_ws(r)};"


def _gen_item(r: random.Random, *, depth: int) -> str:
    k = r.random()
    if k < 0.55 or depth >= 2:
        return _gen_fn(r, depth=depth)
    if k < 0.7:
        return _gen_module(r, depth=depth)
    if k < 0.85:
        return f"struct {_ident(r)} {{ {_ident(r)}: {r.choice(_TYPES)} }}"
    return f"const {_ident(r).upper()}:{_ws(r)}{r.choice(_TYPES)} ={_ws(r)}{r.randint(0, 99)};"


def _gen_module(r: random.Random, *, depth: int) -> str:
    kind = r.choice(["mod", "impl"])
    lines = [f"{kind} {_ident(r).capitalize() if kind == 'impl' else _ident(r)}{_ws(r)}{{"]
    for _ in range(r.randint(0, 3)):
        lines.append(_gen_item(r, depth=depth + 1))
    if r.random() < 0.3:
        lines.append(_line_comment(r))
    lines.append("}")
    return "\n".join(lines)


def _gen_fn(r: random.Random, *, depth: int) -> str:
    args = ", ".join(f"{_ident(r)}: {r.choice(_TYPES)}" for _ in range(r.randint(0, 3)))
    ret = f" -> {r.choice(_TYPES)}" if r.random() < 0.3 else ""
    attr = "#[inline]\n" if r.random() < 0.1 else ""
    header = f"{attr}fn {_ident(r)}({args}){ret}"
    return header + _ws(r) + _gen_block(r, depth=depth + 1, allow_uses=True)


def _gen_block(r: random.Random, *, depth: int, allow_uses: bool = False) -> str:
    if r.random() < 0.1:
        return "{" + r.choice(["", " ", "\n", "\n\n"]) + "}"
    lines: list[str] = ["{" + (" " + _line_comment(r) if r.random() < 0.1 else "")]
    if allow_uses and r.random() < 0.2:
        for _ in range(r.randint(1, 3)):
            lines.append(_gen_use(r))
    for _ in range(r.randint(0, 5)):
        lines.append(_gen_stmt(r, depth=depth))
        if r.random() < 0.15:
            lines.append("")
    if r.random() < 0.15:
        lines.append("return " + _ident(r))
    tail = r.random()
    if tail < 0.2:
        lines.append(_line_comment(r))
    elif tail < 0.3:
        lines.append("")
        lines.append(_block_comment(r))
    lines.append("}")
    indent = "    " * r.randint(0, 2)
    return ("\n" + indent).join(lines)


def _gen_stmt(r: random.Random, *, depth: int) -> str:
    k = r.random()
    if depth < 4 and k < 0.15:
        return _gen_if(r, depth=depth)
    if depth < 4 and k < 0.22:
        head = r.choice([f"while {_ident(r)} < {r.randint(1, 9)}", f"for {_ident(r)} in {_ident(r)}", "loop"])
        return head + _sp(r) + _gen_block(r, depth=depth + 1)
    if k < 0.5:
        stmt = f"let{_sp(r)}{_ident(r)}{_ws(r)}={_ws(r)}{_ident(r)}{_ws(r)}+{_ws(r)}{r.randint(0, 9)};"
    elif k < 0.75:
        stmt = f"{_ident(r)}({_ws(r)}{_ident(r)},{_ws(r)}\"{_comment_text(r)}\"{_ws(r)});"
    elif k < 0.85:
        stmt = f"{_ident(r)}{_ws(r)}+={_ws(r)}1;"
    else:
        stmt = f"let {_ident(r)} = '{r.choice(string.ascii_lowercase)}';"
    c = r.random()
    if c < 0.15:
        stmt += " " + _line_comment(r)
    elif c < 0.2:
        stmt = _line_comment(r) + "\n" + stmt
    elif c < 0.25:
        stmt += " " + _block_comment(r)
    return stmt


def _gen_if(r: random.Random, *, depth: int) -> str:
    out = f"if {_ident(r)} == {r.randint(0, 9)}" + _sp(r) + _gen_block(r, depth=depth + 1)
    for _ in range(r.randint(0, 2)):
        if r.random() < 0.5:
            out += f" else if {_ident(r)}" + _sp(r) + _gen_block(r, depth=depth + 1)
    if r.random() < 0.5:
        out += " else" + _sp(r) + _gen_block(r, depth=depth + 1)
    return out
