"""blobkit: blob storage abstraction with signed URLs and zip bundling."""
