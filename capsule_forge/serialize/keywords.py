"""Reserved words per source dialect."""

from capsule_forge.platform import Dialect

TYPESCRIPT_KEYWORDS = frozenset(
    """
    abstract any as async await boolean break case catch class const constructor
    continue debugger declare default delete do else enum export extends false
    finally for from function get if implements import in infer instanceof
    interface is keyof let module namespace never new null number object of
    package private protected public readonly require return set static string
    super switch symbol this throw true try type typeof undefined unique unknown
    var void while with yield
    """.split()
)

SWIFT_KEYWORDS = frozenset(
    """
    associatedtype actor any as async await break case catch class continue
    default defer deinit do else enum extension fallthrough false fileprivate
    for func guard if import in init inout internal is let nil open operator
    precedencegroup private protocol public repeat rethrows return self Self
    some static struct subscript super switch throw throws true try Type
    typealias var where while
    """.split()
)

KOTLIN_KEYWORDS = frozenset(
    """
    as break class continue do else false for fun if in interface is null
    object package return super this throw true try typealias typeof val var
    when while
    """.split()
)

RUST_KEYWORDS = frozenset(
    """
    as async await break const continue crate dyn else enum extern false fn for
    if impl in let loop match mod move mut pub ref return self Self static
    struct super trait true type union unsafe use where while abstract become
    box do final macro override priv typeof unsized virtual yield try
    """.split()
)

KEYWORDS: dict[Dialect, frozenset[str]] = {
    Dialect.TYPESCRIPT: TYPESCRIPT_KEYWORDS,
    Dialect.SWIFT: SWIFT_KEYWORDS,
    Dialect.KOTLIN: KOTLIN_KEYWORDS,
    Dialect.RUST: RUST_KEYWORDS,
}
