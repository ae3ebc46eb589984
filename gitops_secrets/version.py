"""GitOps Secrets Meta information.
   GitOps Secrets keeps encrypted secrets inside a repository,
   decryptable with a single shared master key.
"""
__title__ = 'gitops_secrets'
__description__ = (
   'Encrypted secrets stored in version control, '
   'decrypted at runtime with a shared master key.'
)
__version__ = '1.0.0'
__copyright__ = 'Copyright (c) GitOps Secrets contributors'
__author__ = 'GitOps Secrets contributors'
__author_email__ = ''
__license__ = 'Apache-2.0'
