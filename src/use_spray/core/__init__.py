"""
Core Package.

Contains the rewrite logic:
- Lexer, top-level scanner and `use` tree parser
- Declaration model and path classifier
- Merge tree builder, group orderer and renderer
- Rewrite engine and rustfmt bridge
"""
