"""Solana connectivity primitives: account reads, decoding, encoding and submission."""
from .client import AccountData, AccountReader, InMemoryAccountReader, SolanaAccountReader
from .program import Ocr2Program, ProgramBinding
from .proposal import decode_proposal, fetch_proposal
from .sender import SolanaTransactionSender, TransactionSender, load_keypair
from .token import TOKEN_PROGRAM_ID, TokenAccountChecker

__all__ = [
    "AccountData",
    "AccountReader",
    "InMemoryAccountReader",
    "Ocr2Program",
    "ProgramBinding",
    "SolanaAccountReader",
    "SolanaTransactionSender",
    "TOKEN_PROGRAM_ID",
    "TokenAccountChecker",
    "TransactionSender",
    "decode_proposal",
    "fetch_proposal",
    "load_keypair",
]
