from prometheus_client import CollectorRegistry, Counter, generate_latest

registry = CollectorRegistry()

PROOFS_GENERATED = Counter('groupproof_proofs_generated_total', 'Membership proofs generated',
                           ['scheme'], registry=registry)
PROOFS_VERIFIED = Counter('groupproof_proofs_verified_total', 'Membership proof verifications',
                          ['scheme', 'result'], registry=registry)


def record_generated(scheme: str):
    PROOFS_GENERATED.labels(scheme=scheme).inc()


def record_verified(scheme: str, ok: bool):
    PROOFS_VERIFIED.labels(scheme=scheme, result='valid' if ok else 'invalid').inc()


def render_metrics() -> str:
    return generate_latest(registry).decode('utf-8')
