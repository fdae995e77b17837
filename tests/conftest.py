"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

MAIN_TF = '''
terraform {
  required_version = ">= 1.0"

  required_providers {
    aws = {
      source                = "hashicorp/aws"
      version               = "~> 5.0"
      configuration_aliases = [aws.replica]
    }
  }
}

provider "aws" {
  alias  = "east"
  region = "us-east-1"
}

variable "region" {
  type        = string
  description = "AWS region"
  default     = "eu-west-1"
}

variable "name" {
  type = string
}

variable "db_password" {
  type      = string
  sensitive = true
}

resource "aws_vpc" "main" {
  cidr_block = "10.0.0.0/16"
}

resource "aws_s3_bucket" "replica" {
  provider = aws.east
  bucket   = "replica"
}

data "aws_caller_identity" "current" {}

module "network" {
  source  = "terraform-aws-modules/vpc/aws"
  version = "5.1.0"
  name    = var.name
}

output "vpc_id" {
  description = "ID of the VPC"
  value       = aws_vpc.main.id
}
'''


@pytest.fixture
def module_dir(tmp_path) -> Path:
    """Return a directory holding a small but complete module."""
    (tmp_path / "main.tf").write_text(MAIN_TF)
    return tmp_path
