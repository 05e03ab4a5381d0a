"""
Generate a matrix operation unrolled for fixed operand shapes, and write it to a python file.
"""

import argparse
import typing as T

from circuitmat import MatrixOperation, code_generation


def parse_shape(text: str) -> T.Tuple[int, int]:
    """Parse a shape of the form `ROWSxCOLS`, eg. `2x3`."""
    try:
        rows, cols = (int(x) for x in text.lower().split("x"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected a shape like 2x3, got: {text}") from None
    return rows, cols


def main(args: argparse.Namespace):
    operation = MatrixOperation(args.operation)
    shapes = args.shape or ([(2, 3), (3, 2)] if operation == MatrixOperation.Mult else [(3, 3)])
    if operation == MatrixOperation.DotProduct:
        operands = [args.length, args.length]
    elif operation in (MatrixOperation.Add, MatrixOperation.Sub):
        operands = shapes * 2
    else:
        operands = shapes
    params = code_generation.GeneratorParams(function_name=args.name)
    code = code_generation.generate_code(operation, *operands, params=params)
    code_generation.mkdir_and_write_file(code=code, path=args.output)


def parse_args(argv: T.Optional[T.List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("output", type=str, help="Output path")
    parser.add_argument(
        "--operation",
        type=str,
        default=MatrixOperation.Mult.value,
        choices=[x.value for x in MatrixOperation],
        help="Operation to generate",
    )
    parser.add_argument(
        "--shape",
        type=parse_shape,
        action="append",
        default=None,
        help="Operand shape as ROWSxCOLS. Pass twice for mult, once for every other matrix "
        "operation (both operands of add and sub share it).",
    )
    parser.add_argument("--length", type=int, default=3, help="Vector length for dot_product")
    parser.add_argument("--name", type=str, default=None, help="Name of the generated function")
    args = parser.parse_args(argv)

    if args.shape is not None:
        if args.operation == MatrixOperation.DotProduct.value:
            parser.error("dot_product takes --length, not --shape")
        expected = 2 if args.operation == MatrixOperation.Mult.value else 1
        if len(args.shape) != expected:
            parser.error(
                f"{args.operation} takes {expected} --shape argument(s), got {len(args.shape)}"
            )
        if expected == 2 and args.shape[0][1] != args.shape[1][0]:
            parser.error(f"mult needs matching inner dimensions, got {args.shape}")
    return args


if __name__ == "__main__":
    main(parse_args())
