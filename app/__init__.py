"""HTD notification service package.

Kept as a regular package so ``app`` resolves to this project even when an
unrelated ``app`` distribution is installed in the environment.
"""
