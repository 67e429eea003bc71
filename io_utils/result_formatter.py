from core.data_models import ResidueSamples, Topology


class ResultFormatter:
    @staticmethod
    def to_dict(topology: Topology) -> dict[str, object]:
        result: dict[str, object] = {
            "points": topology.count,
            "layer_sizes": list(topology.layer_sizes),
            "extent": topology.extent,
        }
        if topology.centroid is not None:
            result["centroid"] = [float(v) for v in topology.centroid]
        if topology.candidate is not None:
            result.update(topology.candidate.to_dict())
        return result

    @staticmethod
    def format_summary(topology: Topology, samples: ResidueSamples | None = None) -> str:
        summary = ["=== Membrane Topology ==="]

        if samples is not None:
            total = len(samples)
            exposed = samples.exposed_count
            hydrophobic = int((samples.exposed & samples.hydrophobic).sum())
            summary += [
                f"CA samples: {total}",
                f"Exposed residues: {exposed} ({exposed / total if total else 0.0:.2%})",
                f"Exposed hydrophobic: {hydrophobic}",
            ]

        membrane = topology.candidate
        if membrane is not None:
            normal = membrane.unit_normal
            summary += [
                f"Q max: {membrane.qmax:.6g}",
                f"Thickness: {membrane.thickness:.2f} A",
                f"Normal: ({normal[0]:.3f}, {normal[1]:.3f}, {normal[2]:.3f})",
            ]

        summary.append(
            f"Membrane points: {topology.count} "
            f"({topology.layer_sizes[0]} + {topology.layer_sizes[1]})"
        )
        return "\n".join(summary)
