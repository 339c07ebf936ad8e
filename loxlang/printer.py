"""AST printer.

Renders expressions and statements as fully parenthesized prefix forms,
e.g. ``1 + 2 * 3`` becomes ``(+ 1.0 (* 2.0 3.0))``. Used by the ``parse``
command of the driver and by debug logging; the output makes precedence and
the lowering of ``for`` loops visible.


File: printer.py
Version: 0.1.0
License: MIT
"""

from loxlang import nodes


def _parenthesize(name: str, *parts) -> str:
    return "(" + " ".join([name, *parts]) + ")"


def format_expr(expr: nodes.Expr) -> str:
    """
    Convert an expression back to a readable prefix string.
    """
    match expr:
        case nodes.Literal(value=None):
            return "nil"
        case nodes.Literal(value=bool() as value):
            return "true" if value else "false"
        case nodes.Literal(value=value):
            return str(value)
        case nodes.Grouping(expression=expression):
            return _parenthesize("group", format_expr(expression))
        case nodes.Unary(operator=operator, right=right):
            return _parenthesize(operator.lexeme, format_expr(right))
        case nodes.Binary(left=left, operator=operator, right=right) | nodes.Logical(
            left=left, operator=operator, right=right
        ):
            return _parenthesize(operator.lexeme, format_expr(left), format_expr(right))
        case nodes.Variable(name=name):
            return name.lexeme
        case nodes.This():
            return "this"
        case nodes.Assign(name=name, value=value):
            return _parenthesize("=", name.lexeme, format_expr(value))
        case nodes.Call(callee=callee, arguments=arguments):
            return _parenthesize("call", format_expr(callee), *(format_expr(a) for a in arguments))
        case nodes.Get(object=obj, name=name):
            return _parenthesize(".", format_expr(obj), name.lexeme)
        case nodes.Set(object=obj, name=name, value=value):
            return _parenthesize("=", _parenthesize(".", format_expr(obj), name.lexeme), format_expr(value))
    return f"<expr {type(expr).__name__}>"


def format_stmt(stmt: nodes.Stmt) -> str:
    """
    Convert a statement back to a readable prefix string.
    """
    match stmt:
        case nodes.Expression(expression=expression):
            return _parenthesize(";", format_expr(expression))
        case nodes.Print(expression=expression):
            return _parenthesize("print", format_expr(expression))
        case nodes.Var(name=name, initializer=None):
            return _parenthesize("var", name.lexeme)
        case nodes.Var(name=name, initializer=initializer):
            return _parenthesize("var", name.lexeme, format_expr(initializer))
        case nodes.Block(statements=statements):
            return _parenthesize("block", *(format_stmt(s) for s in statements))
        case nodes.If(condition=condition, then_branch=then_branch, else_branch=None):
            return _parenthesize("if", format_expr(condition), format_stmt(then_branch))
        case nodes.If(condition=condition, then_branch=then_branch, else_branch=else_branch):
            return _parenthesize(
                "if-else", format_expr(condition), format_stmt(then_branch), format_stmt(else_branch)
            )
        case nodes.While(condition=condition, body=body):
            return _parenthesize("while", format_expr(condition), format_stmt(body))
        case nodes.Function(name=name, params=params, body=body):
            signature = name.lexeme + "(" + " ".join(p.lexeme for p in params) + ")"
            return _parenthesize("fun", signature, *(format_stmt(s) for s in body))
        case nodes.Return(value=None):
            return "(return)"
        case nodes.Return(value=value):
            return _parenthesize("return", format_expr(value))
        case nodes.Class(name=name, methods=methods):
            return _parenthesize("class", name.lexeme, *(format_stmt(m) for m in methods))
    return f"<stmt {type(stmt).__name__}>"
