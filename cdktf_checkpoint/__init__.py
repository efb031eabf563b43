"""cdktf-checkpoint - anonymous usage telemetry for the CDK for Terraform CLI."""
__version__ = "0.1.0"
