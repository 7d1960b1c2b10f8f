"""Unit tests for the syntax layer: node helpers, declarations and symbol lookup."""

import pytest

pytestmark = pytest.mark.fast

from pluginopts.exceptions import ParserError
from pluginopts.syntax import Project
from pluginopts.syntax.nodes import (
    boolean_value,
    decode_js_string,
    is_getter,
    parse_number,
    string_value,
    unwrap,
)


def _first(source, kind):
    return next(source.root.descendants(kind))


# ============================================================================
# LITERALS
# ============================================================================

@pytest.mark.parametrize("text,expected", [
    ("42", 42),
    ("0x1F", 31),
    ("0o17", 15),
    ("0b101", 5),
    ("017", 15),
    ("089", 89),
    ("1_000", 1000),
    ("1e3", 1000),
    ("0.5", 0.5),
])
def test_parse_number(text, expected):
    """
    JS numeric literals parse to Python numbers; integral values are ints.
    """
    value = parse_number(text)
    assert value == expected
    assert type(value) is type(expected)


def test_decode_js_string_escapes():
    """
    Escape sequences decode like JavaScript, including surrogate pairs.
    """
    assert decode_js_string(r"a\nb") == "a\nb"
    assert decode_js_string(r"\x41B\u{43}") == "ABC"
    assert decode_js_string(r"\uD83D\uDE00") == "\U0001F600"
    assert decode_js_string(r"it\'s") == "it's"


def test_decode_js_string_invalid_code_points():
    """
    Unpaired surrogates and code points past U+10FFFF become U+FFFD.
    """
    assert decode_js_string(r"[\uD800-\uDBFF]") == "[\ufffd-\ufffd]"
    assert decode_js_string(r"\uDE00x") == "\ufffdx"
    assert decode_js_string(r"\u{110000}") == "\ufffd"


def test_string_value_of_literals():
    """
    Quoted strings and plain templates have a value; templates with
    substitutions do not.
    """
    project = Project()
    source = project.add_source("a.ts", 'const a = "x"; const b = `y`; const c = `${a}z`;')
    values = [
        string_value(d.field("value"))
        for d in source.root.descendants("variable_declarator")
    ]
    assert values == ["x", "y", None]


def test_unwrap_removes_casts_and_parentheses():
    """
    `as` casts, parentheses and angle-bracket assertions are transparent.
    """
    project = Project()
    source = project.add_source("a.ts", "const a = ((<any>[1, 2]) as const);")
    init = _first(source, "variable_declarator").field("value")
    assert unwrap(init).kind == "array"


def test_unwrap_removes_satisfies_and_non_null():
    """
    `satisfies` clauses and `!` assertions are transparent too.
    """
    project = Project()
    source = project.add_source("a.ts", "const a = ([1] satisfies number[])!;")
    init = _first(source, "variable_declarator").field("value")
    assert unwrap(init).kind == "array"


def test_boolean_value_and_getter_detection():
    """
    true/false literals are recognized and `get default() {}` is a getter.
    """
    project = Project()
    source = project.add_source("a.ts", "const o = { a: true, b: false, get c() { return 1; } };")
    pairs = list(source.root.descendants("pair"))
    assert [boolean_value(p.field("value")) for p in pairs] == [True, False]
    assert is_getter(_first(source, "method_definition"))


# ============================================================================
# DECLARATIONS AND SYMBOLS
# ============================================================================

def test_enum_members_auto_increment():
    """
    Members without initializers continue from the previous numeric value.
    """
    project = Project()
    source = project.add_source("a.ts", """
        enum Mode { A, B = 5, C, D = "d", E }
        const x = Mode.C;
    """)
    decl = source.top_level()["Mode"]
    members = project.symbols.enum_members(decl)
    assert members["A"].value == 0
    assert members["B"].value == 5
    assert members["C"].value == 6
    assert members["D"].value == "d"
    assert members["E"].value is None


def test_member_declaration_resolves_enum_access():
    """
    `Mode.C` resolves to the enum member declaration.
    """
    project = Project()
    source = project.add_source("a.ts", "enum Mode { A, B, C }\nconst x = Mode.C;")
    access = _first(source, "member_expression")
    decl = project.symbols.member_declaration(access)
    assert decl.kind == "enum_member"
    assert decl.value == 2


def test_declaration_of_follows_relative_import_and_reexport():
    """
    Imports are followed through `export { x } from` re-exports.
    """
    project = Project()
    project.add_source("lib/values.ts", "export const LIMIT = 10;")
    project.add_source("lib/index.ts", 'export { LIMIT as MAX } from "./values";')
    main = project.add_source("main.ts", 'import { MAX } from "./lib";\nconst y = MAX;')
    ident = _first(main, "variable_declarator").field("value")
    decl = project.symbols.declaration_of(ident)
    assert decl.kind == "variable"
    assert decl.name == "LIMIT"
    assert decl.initializer.text == "10"


def test_declaration_of_follows_star_export():
    """
    `export * from` chains are searched for the requested name.
    """
    project = Project()
    project.add_source("a.ts", "export const VALUE = 'v';")
    project.add_source("b.ts", 'export * from "./a";')
    main = project.add_source("main.ts", 'import { VALUE } from "./b";\nconst y = VALUE;')
    ident = _first(main, "variable_declarator").field("value")
    assert project.symbols.declaration_of(ident).initializer.text == "'v'"


def test_namespace_import_member_access():
    """
    `ns.NAME` resolves through a namespace import.
    """
    project = Project()
    project.add_source("consts.ts", "export const NAME = 'n';")
    main = project.add_source("main.ts", 'import * as C from "./consts";\nconst y = C.NAME;')
    access = _first(main, "member_expression")
    decl = project.symbols.member_declaration(access)
    assert decl.name == "NAME"


def test_unresolved_import_falls_back_to_ambient_files(project):
    """
    A package import that cannot be resolved by path is looked up in the
    ambient files.
    """
    main = project.add_source("main.ts", 'import { OptionType } from "@utils/types";\nconst t = OptionType.SELECT;')
    access = _first(main, "member_expression")
    decl = project.symbols.member_declaration(access)
    assert decl.kind == "enum_member"
    assert decl.value == 4


def test_lexical_scope_prefers_inner_declaration():
    """
    An inner block declaration shadows a top-level one.
    """
    project = Project()
    source = project.add_source("a.ts", """
        const value = 1;
        function f() {
            const value = 2;
            return value;
        }
    """)
    ret = _first(source, "return_statement")
    ident = ret.children[0]
    decl = project.symbols.declaration_of(ident)
    assert decl.initializer.text == "2"


# ============================================================================
# PROJECT
# ============================================================================

def test_tsconfig_path_aliases(temp_dir):
    """
    compilerOptions.paths aliases are used to resolve imports, and tsconfig
    comments and trailing commas are tolerated.
    """
    (temp_dir / "src" / "utils").mkdir(parents=True)
    (temp_dir / "src" / "utils" / "constants.ts").write_text("export const X = 1;\n")
    (temp_dir / "tsconfig.json").write_text("""{
        // aliases
        "compilerOptions": {
            "baseUrl": "./src",
            "paths": { "@utils/*": ["./utils/*"], },
        },
    }""")
    project = Project(root=temp_dir)
    main = project.add_source(str(temp_dir / "src" / "main.ts"), "")
    resolved = project.resolve_module("@utils/constants", main.path)
    assert resolved is not None
    assert resolved.path.endswith("src/utils/constants.ts")


def test_get_source_missing_file_raises(temp_dir):
    """
    Reading a file that does not exist raises ParserError; find_source
    returns None instead.
    """
    project = Project(root=temp_dir)
    assert project.find_source(temp_dir / "missing.ts") is None
    with pytest.raises(ParserError):
        project.get_source(temp_dir / "missing.ts")


def test_tsx_sources_parse_with_tsx_grammar():
    """
    .tsx files are parsed with the TSX grammar so JSX does not break the tree.
    """
    project = Project()
    source = project.add_source("a.tsx", "const el = <div className='x' />;")
    assert source.grammar == "tsx"
    assert not source.tree.root_node.has_error
