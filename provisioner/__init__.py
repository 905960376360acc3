"""
Idempotent server provisioning.

Steps register with the StepRegistry and are run in order by the
ProvisioningSequencer.
"""
