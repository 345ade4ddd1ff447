# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Turns a model-written script into an awaitable function over a persistent
namespace.

The script body becomes the body of ``async def __agent_script__()`` so it may
``await`` UDFs and ``return`` a value. Every name the script binds at its top
level is declared ``global``, which makes the binding land in the sandbox
namespace and survive into the next script.
"""
import ast

SCRIPT_FUNCTION_NAME = "__agent_script__"
SCRIPT_FILENAME = "<agent-script>"


class _TopLevelBindings(ast.NodeVisitor):
    """Collects the names a block binds in its own scope.

    Bodies of nested functions, classes and lambdas are skipped (their
    decorators, bases and defaults still run in the outer scope), as are
    comprehension targets. Walrus targets inside comprehensions bind in the
    enclosing scope and are kept.
    """

    def __init__(self):
        self.names: set[str] = set()
        self._comprehension_depth = 0

    def _visit_arguments_defaults(self, args: ast.arguments) -> None:
        for default in args.defaults + [d for d in args.kw_defaults if d is not None]:
            self.visit(default)

    def visit_FunctionDef(self, node: ast.FunctionDef | ast.AsyncFunctionDef) -> None:
        self.names.add(node.name)
        for decorator in node.decorator_list:
            self.visit(decorator)
        self._visit_arguments_defaults(node.args)

    visit_AsyncFunctionDef = visit_FunctionDef

    def visit_ClassDef(self, node: ast.ClassDef) -> None:
        self.names.add(node.name)
        for child in node.decorator_list + node.bases + [k.value for k in node.keywords]:
            self.visit(child)

    def visit_Lambda(self, node: ast.Lambda) -> None:
        self._visit_arguments_defaults(node.args)

    def _visit_comprehension(self, node: ast.AST) -> None:
        self._comprehension_depth += 1
        self.generic_visit(node)
        self._comprehension_depth -= 1

    visit_ListComp = _visit_comprehension
    visit_SetComp = _visit_comprehension
    visit_DictComp = _visit_comprehension
    visit_GeneratorExp = _visit_comprehension

    def visit_NamedExpr(self, node: ast.NamedExpr) -> None:
        self.names.add(node.target.id)
        self.visit(node.value)

    def visit_Name(self, node: ast.Name) -> None:
        if isinstance(node.ctx, (ast.Store, ast.Del)) and not self._comprehension_depth:
            self.names.add(node.id)

    def visit_Import(self, node: ast.Import) -> None:
        for alias in node.names:
            self.names.add(alias.asname or alias.name.split(".")[0])

    def visit_ImportFrom(self, node: ast.ImportFrom) -> None:
        for alias in node.names:
            if alias.name != "*":
                self.names.add(alias.asname or alias.name)

    def visit_ExceptHandler(self, node: ast.ExceptHandler) -> None:
        if node.name:
            self.names.add(node.name)
        self.generic_visit(node)

    def visit_MatchAs(self, node: ast.MatchAs) -> None:
        if node.name:
            self.names.add(node.name)
        self.generic_visit(node)

    def visit_MatchStar(self, node: ast.MatchStar) -> None:
        if node.name:
            self.names.add(node.name)

    def visit_MatchMapping(self, node: ast.MatchMapping) -> None:
        if node.rest:
            self.names.add(node.rest)
        self.generic_visit(node)

    def visit_Global(self, node: ast.Global) -> None:
        self.names.update(node.names)


class _AdaptTopLevelStatements(ast.NodeTransformer):
    """Rewrite statements that cannot coexist with the hoisted ``global``.

    The script's own ``global`` statements are dropped since their names are
    already hoisted. Annotated assignments lose their annotation because Python
    rejects annotations on global names.
    """

    def visit_Global(self, node: ast.Global) -> ast.AST:
        return ast.copy_location(ast.Pass(), node)

    def visit_AnnAssign(self, node: ast.AnnAssign) -> ast.AST:
        if node.value is None:
            return ast.copy_location(ast.Pass(), node)
        return ast.copy_location(ast.Assign(targets=[node.target], value=node.value), node)

    def _keep(self, node: ast.AST) -> ast.AST:
        return node

    visit_FunctionDef = _keep
    visit_AsyncFunctionDef = _keep
    visit_ClassDef = _keep
    visit_Lambda = _keep


def top_level_bindings(tree: ast.Module) -> set[str]:
    collector = _TopLevelBindings()
    for statement in tree.body:
        collector.visit(statement)
    return collector.names


def compile_script(script: str):
    """Compile ``script`` into a code object defining SCRIPT_FUNCTION_NAME.

    Raises SyntaxError when the script does not parse.
    """
    tree = ast.parse(script, filename=SCRIPT_FILENAME, mode="exec")
    names = top_level_bindings(tree)
    body = [_AdaptTopLevelStatements().visit(statement) for statement in tree.body]

    wrapper = ast.parse(f"async def {SCRIPT_FUNCTION_NAME}():\n    pass\n")
    function = wrapper.body[0]
    prologue: list[ast.stmt] = [ast.Global(names=sorted(names))] if names else []
    function.body = (prologue + body) or [ast.Pass()]
    ast.fix_missing_locations(wrapper)

    return compile(wrapper, SCRIPT_FILENAME, "exec")
