"""
Receipt lifecycle.

Orchestrates: initiate (pending | error) → callback (processing | cancelled)
→ sweep (loan_released).
"""
from loanpay.lifecycle.callback import apply_callback
from loanpay.lifecycle.initiator import PaymentProvider, initiate_payment
from loanpay.lifecycle.phone import normalize_phone
from loanpay.lifecycle.state_machine import TERMINAL, TRANSITIONS, can_transition, transition
from loanpay.lifecycle.sweeper import release_due_loans, run_release_sweep

__all__ = [
    "PaymentProvider",
    "TERMINAL",
    "TRANSITIONS",
    "apply_callback",
    "can_transition",
    "initiate_payment",
    "normalize_phone",
    "release_due_loans",
    "run_release_sweep",
    "transition",
]
